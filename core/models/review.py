"""
Remedy review model.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db import new_id, utcnow

from .base import Base

if TYPE_CHECKING:
    from .user import User


class RemedyReview(Base):
    """
    A signed-in user's rating and write-up of a remedy.

    One review per user per remedy. verified is set by a moderator; a
    rejected review is deleted outright.
    """

    __tablename__ = "remedy_reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "remedy_id", name="uq_reviews_user_remedy"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    remedy_id: Mapped[str] = mapped_column(String(100), index=True)
    remedy_name: Mapped[str] = mapped_column(String(200))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    rating: Mapped[int] = mapped_column(Integer)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    comment: Mapped[str] = mapped_column(Text)
    verified: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    user: Mapped["User"] = relationship("User", back_populates="reviews")
