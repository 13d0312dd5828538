"""Favorite repository."""

from core.logging import get_logger
from core.models import Favorite

from .base import OwnedRepository

logger = get_logger("repository.favorite")


class FavoriteRepository(OwnedRepository[Favorite]):
    """Saved remedies for a session or user."""

    model = Favorite

    def list_for_owner(
        self,
        session_id: str | None = None,
        user_id: str | None = None,
        collection_name: str | None = None,
    ) -> list[Favorite]:
        """Newest first. Empty when no owner identifier is given."""
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return []

        query = self.session.query(Favorite).filter(clause)
        if collection_name:
            query = query.filter(Favorite.collection_name == collection_name)
        return query.order_by(Favorite.created_at.desc()).all()

    def get_for_remedy(
        self, remedy_id: str, session_id: str | None = None, user_id: str | None = None
    ) -> Favorite | None:
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return None
        return (
            self.session.query(Favorite)
            .filter(clause, Favorite.remedy_id == remedy_id)
            .first()
        )

    def list_collections(
        self, session_id: str | None = None, user_id: str | None = None
    ) -> list[str]:
        """Distinct, non-empty collection names, sorted."""
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return []
        rows = (
            self.session.query(Favorite.collection_name)
            .filter(clause, Favorite.collection_name.isnot(None))
            .distinct()
            .order_by(Favorite.collection_name)
            .all()
        )
        return [name for (name,) in rows if name]

    def count_for_user(self, user_id: str) -> int:
        return self.count(user_id=user_id)
