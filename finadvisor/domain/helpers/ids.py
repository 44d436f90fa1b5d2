import threading
import time

_lock = threading.Lock()
_last_issued = 0


def new_timestamp_id() -> str:
    """
    Returns the current epoch time in milliseconds as a string.
    When called again within the same millisecond the previous value is
    bumped by one, so ids issued by this process never repeat.
    """
    global _last_issued
    with _lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_issued:
            candidate = _last_issued + 1
        _last_issued = candidate
        return str(candidate)
