import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from finadvisor.domain.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)


def driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def is_unique_violation(exc: IntegrityError) -> bool:
    message = driver_message(exc).lower()
    return "unique" in message or "duplicate" in message


@contextmanager
def write_transaction(db, conflict_message: str = "Duplicate entry"):
    """
    Run the statements of the block and commit them. A unique-constraint
    violation becomes ConflictError, any other store failure InternalError.
    The session is rolled back in both cases.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(conflict_message) from e
        logger.error("Integrity error: %s", driver_message(e))
        raise InternalError(driver_message(e)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Store error: %s", driver_message(e))
        raise InternalError(driver_message(e)) from e
