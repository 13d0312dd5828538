"""
Natural remedy catalogue and user-submitted contributions.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.db import new_id, utcnow

from .base import Base

EVIDENCE_LEVELS = ("Strong", "Moderate", "Limited", "Traditional")

CONTRIBUTION_PENDING = "pending"
CONTRIBUTION_APPROVED = "approved"
CONTRIBUTION_REJECTED = "rejected"
CONTRIBUTION_STATUSES = (CONTRIBUTION_PENDING, CONTRIBUTION_APPROVED, CONTRIBUTION_REJECTED)


class NaturalRemedy(Base):
    """
    A catalogue entry.

    matching_nutrients and references are JSON lists; references hold
    {"title", "url"} objects.
    """

    __tablename__ = "natural_remedies"

    id: Mapped[str] = mapped_column(String(100), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    category: Mapped[str] = mapped_column(String(100), index=True)
    matching_nutrients: Mapped[list] = mapped_column(JSON, default=list)
    similarity_score: Mapped[float] = mapped_column(Float, default=0.0)
    evidence_level: Mapped[str | None] = mapped_column(String(20), nullable=True)
    usage: Mapped[str | None] = mapped_column(Text, nullable=True)
    dosage: Mapped[str | None] = mapped_column(Text, nullable=True)
    precautions: Mapped[str | None] = mapped_column(Text, nullable=True)
    scientific_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    references: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class RemedyContribution(Base):
    """A remedy submitted by a user, waiting on moderator review."""

    __tablename__ = "remedy_contributions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(100))
    ingredients: Mapped[list] = mapped_column(JSON, default=list)
    benefits: Mapped[list] = mapped_column(JSON, default=list)
    usage: Mapped[str | None] = mapped_column(Text, nullable=True)
    dosage: Mapped[str | None] = mapped_column(Text, nullable=True)
    precautions: Mapped[str | None] = mapped_column(Text, nullable=True)
    scientific_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    references: Mapped[list] = mapped_column(JSON, default=list)
    image_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=CONTRIBUTION_PENDING, index=True)
    moderator_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    moderated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
