"""Journal entry repository."""

from datetime import date

from sqlalchemy import func

from core.models import JournalEntry

from .base import BaseRepository


class JournalRepository(BaseRepository[JournalEntry]):
    """Remedy tracking journal, always scoped to one user."""

    model = JournalEntry

    def get_for_user(self, entry_id: str, user_id: str) -> JournalEntry | None:
        """Another user's entry is indistinguishable from a missing one."""
        return (
            self.session.query(JournalEntry)
            .filter(JournalEntry.id == entry_id, JournalEntry.user_id == user_id)
            .first()
        )

    def list_entries(
        self,
        user_id: str,
        remedy_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[JournalEntry], int]:
        """Newest first, with the unpaginated total."""
        query = self.session.query(JournalEntry).filter(JournalEntry.user_id == user_id)
        if remedy_id:
            query = query.filter(JournalEntry.remedy_id == remedy_id)
        if start_date:
            query = query.filter(JournalEntry.date >= start_date)
        if end_date:
            query = query.filter(JournalEntry.date <= end_date)

        total = query.count()
        entries = (
            query.order_by(JournalEntry.date.desc(), JournalEntry.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return entries, total

    def list_tracked_remedies(self, user_id: str) -> list[dict]:
        rows = (
            self.session.query(JournalEntry.remedy_id, func.max(JournalEntry.remedy_name))
            .filter(JournalEntry.user_id == user_id)
            .group_by(JournalEntry.remedy_id)
            .order_by(func.max(JournalEntry.remedy_name))
            .all()
        )
        return [{"remedyId": remedy_id, "remedyName": name} for remedy_id, name in rows]

    def entries_since(
        self, user_id: str, remedy_id: str, since: date, limit: int = 365
    ) -> list[JournalEntry]:
        """Oldest first; the window used for insights."""
        return (
            self.session.query(JournalEntry)
            .filter(
                JournalEntry.user_id == user_id,
                JournalEntry.remedy_id == remedy_id,
                JournalEntry.date >= since,
            )
            .order_by(JournalEntry.date.asc())
            .limit(limit)
            .all()
        )
