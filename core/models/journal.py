"""
Remedy tracking journal model.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import new_id, utcnow

from .base import Base

if TYPE_CHECKING:
    from .user import User


class JournalEntry(Base):
    """
    One day of self-reported effects for one remedy.

    Ratings (rating, mood, energy_level, sleep_quality) are 1-5.
    """

    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "remedy_id", "date", name="uq_journal_user_remedy_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    remedy_id: Mapped[str] = mapped_column(String(100), index=True)
    remedy_name: Mapped[str] = mapped_column(String(200))
    date: Mapped[date] = mapped_column(Date, index=True)
    rating: Mapped[int] = mapped_column(Integer)
    symptoms: Mapped[list] = mapped_column(JSON, default=list)
    side_effects: Mapped[list] = mapped_column(JSON, default=list)
    dosage_taken: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    mood: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="journal_entries")
