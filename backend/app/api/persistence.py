"""
Helpers for turning database constraint failures into API errors.
"""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.logging import get_logger
from core.repositories import is_unique_violation

from .response import ApiError, ErrorCode

logger = get_logger("api.persistence")


@contextmanager
def conflict_on_duplicate(db: Session, message: str) -> Generator[None, None, None]:
    """
    Map a UNIQUE violation inside the block to a 409 with ``message``.

    Usage:
        with conflict_on_duplicate(db, "This remedy is already in your favorites"):
            favorite = repo.create(...)
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            logger.info("duplicate_rejected", message=message)
            raise ApiError(ErrorCode.CONFLICT, message) from None
        raise
