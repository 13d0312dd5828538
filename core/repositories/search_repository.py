"""Search history and filter preference repositories."""

from sqlalchemy import func

from core.models import FilterPreference, SearchHistory

from .base import OwnedRepository


class SearchHistoryRepository(OwnedRepository[SearchHistory]):
    """Queries run by a session or user."""

    model = SearchHistory

    def list_for_owner(
        self, session_id: str | None = None, user_id: str | None = None, limit: int = 10
    ) -> list[SearchHistory]:
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return []
        return (
            self.session.query(SearchHistory)
            .filter(clause)
            .order_by(SearchHistory.created_at.desc())
            .limit(limit)
            .all()
        )

    def clear_for_owner(self, session_id: str | None = None, user_id: str | None = None) -> int:
        """Delete the owner's history. Never deletes anything without an identifier."""
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return 0
        deleted = self.session.query(SearchHistory).filter(clause).delete(
            synchronize_session=False
        )
        self.session.flush()
        return deleted

    def popular_queries(self, limit: int = 5) -> list[dict]:
        count = func.count(SearchHistory.id)
        rows = (
            self.session.query(SearchHistory.query, count)
            .group_by(SearchHistory.query)
            .order_by(count.desc(), SearchHistory.query.asc())
            .limit(limit)
            .all()
        )
        return [{"query": query, "count": n} for query, n in rows]


class FilterPreferenceRepository(OwnedRepository[FilterPreference]):
    """Saved search filters."""

    model = FilterPreference

    def get_for_owner(
        self, session_id: str | None = None, user_id: str | None = None
    ) -> FilterPreference | None:
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return None
        return self.session.query(FilterPreference).filter(clause).first()

    def upsert(
        self,
        session_id: str | None,
        user_id: str | None,
        categories: list[str] | None = None,
        nutrients: list[str] | None = None,
        evidence_levels: list[str] | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> FilterPreference:
        """Keyed by session id; falls back to user id when there is no session."""
        if session_id:
            existing = (
                self.session.query(FilterPreference)
                .filter(FilterPreference.session_id == session_id)
                .first()
            )
        else:
            existing = (
                self.session.query(FilterPreference)
                .filter(FilterPreference.user_id == user_id)
                .first()
            )

        values = {
            "categories": categories or [],
            "nutrients": nutrients or [],
            "evidence_levels": evidence_levels or [],
            "sort_by": sort_by,
            "sort_order": sort_order,
        }
        if existing is None:
            existing = FilterPreference(session_id=session_id, user_id=user_id, **values)
            self.session.add(existing)
        else:
            for key, value in values.items():
                setattr(existing, key, value)
            if user_id and not existing.user_id:
                existing.user_id = user_id

        self.session.flush()
        return existing

    def clear_for_owner(self, session_id: str | None = None, user_id: str | None = None) -> int:
        clause = self.owner_clause(session_id, user_id)
        if clause is None:
            return 0
        deleted = self.session.query(FilterPreference).filter(clause).delete(
            synchronize_session=False
        )
        self.session.flush()
        return deleted
