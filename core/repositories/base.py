"""Base repository class with common CRUD operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import Base

T = TypeVar("T", bound=Base)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when an IntegrityError came from a UNIQUE constraint (SQLite or PostgreSQL)."""
    message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    return "unique" in message or "duplicate key" in message


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Repositories flush but never commit; the request-scoped session commits.

    Usage:
        class FavoriteRepository(BaseRepository[Favorite]):
            model = Favorite

        repo = FavoriteRepository(session)
        favorite = repo.get_by_id(favorite_id)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: Any) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def create(self, **kwargs) -> T:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, instance: T, **kwargs) -> T:
        """Apply attribute changes to a loaded record. None values are skipped."""
        for key, value in kwargs.items():
            if value is not None and hasattr(instance, key):
                setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, instance: T) -> None:
        """Delete a loaded record."""
        self.session.delete(instance)
        self.session.flush()

    def count(self, **filters) -> int:
        """Count records, optionally filtered by column equality."""
        query = self.session.query(func.count(self.model.id))  # type: ignore[attr-defined]
        for key, value in filters.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)
        return query.scalar() or 0

    def exists_where(self, **filters) -> bool:
        """Check if any record exists matching filters."""
        query = self.session.query(self.model)
        for key, value in filters.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)
        result = self.session.query(query.exists()).scalar()
        return bool(result) if result is not None else False


class OwnedRepository(BaseRepository[T]):
    """
    Repository for rows owned by a browser session and/or a user.

    Lookups OR the two identifiers together. With neither identifier the
    owner clause is None and callers must return nothing rather than query.
    """

    def owner_clause(self, session_id: str | None, user_id: str | None):
        conditions = []
        if session_id:
            conditions.append(self.model.session_id == session_id)  # type: ignore[attr-defined]
        if user_id:
            conditions.append(self.model.user_id == user_id)  # type: ignore[attr-defined]
        if not conditions:
            return None
        return or_(*conditions)
