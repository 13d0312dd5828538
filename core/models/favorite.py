"""
Favorite (saved remedy) model.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import new_id, utcnow

from .base import Base

if TYPE_CHECKING:
    from .user import User


class Favorite(Base):
    """
    A remedy bookmarked by a signed-in user or an anonymous browser session.

    Either user_id or session_id identifies the owner; both may be set when a
    session was later claimed by a user.
    """

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("session_id", "remedy_id", name="uq_favorites_session_remedy"),
        UniqueConstraint("user_id", "remedy_id", name="uq_favorites_user_remedy"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    remedy_id: Mapped[str] = mapped_column(String(100))
    remedy_name: Mapped[str] = mapped_column(String(200))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    collection_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    user: Mapped["User | None"] = relationship("User", back_populates="favorites")
