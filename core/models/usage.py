"""
Daily usage counters.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import new_id, utcnow

from .base import Base

if TYPE_CHECKING:
    from .user import User

USAGE_TYPES = ("searches", "aiSearches", "exports", "comparisons")

# API name -> column name
USAGE_COLUMNS = {
    "searches": "searches",
    "aiSearches": "ai_searches",
    "exports": "exports",
    "comparisons": "comparisons",
}


class UsageRecord(Base):
    """Per-user counters for one UTC day."""

    __tablename__ = "usage_records"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_usage_user_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    date: Mapped[date] = mapped_column(Date, index=True)
    searches: Mapped[int] = mapped_column(Integer, default=0)
    ai_searches: Mapped[int] = mapped_column(Integer, default=0)
    exports: Mapped[int] = mapped_column(Integer, default=0)
    comparisons: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="usage_records")

    def get_count(self, usage_type: str) -> int:
        return getattr(self, USAGE_COLUMNS[usage_type]) or 0
