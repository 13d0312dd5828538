"""
Search history and saved filter preference models.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.db import new_id, utcnow

from .base import Base


class SearchHistory(Base):
    """A query run by a session or user, kept for history and popularity stats."""

    __tablename__ = "search_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    query: Mapped[str] = mapped_column(String(100), index=True)
    results_count: Mapped[int] = mapped_column(Integer, default=0)
    filters: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class FilterPreference(Base):
    """Last-used search filters for a session (or user when no session is known)."""

    __tablename__ = "filter_preferences"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str | None] = mapped_column(String(36), unique=True, nullable=True)
    user_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    categories: Mapped[list] = mapped_column(JSON, default=list)
    nutrients: Mapped[list] = mapped_column(JSON, default=list)
    evidence_levels: Mapped[list] = mapped_column(JSON, default=list)
    sort_by: Mapped[str | None] = mapped_column(String(20), nullable=True)
    sort_order: Mapped[str | None] = mapped_column(String(4), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
