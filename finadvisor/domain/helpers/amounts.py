import math
from typing import Optional


def is_positive_amount(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def is_non_negative_amount(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value >= 0
