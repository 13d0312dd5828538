"""
Drug/supplement interaction reference table.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.db import new_id, utcnow

from .base import Base

# Lower sorts first
SEVERITY_ORDER = {
    "contraindicated": 0,
    "severe": 1,
    "moderate": 2,
    "mild": 3,
}
UNKNOWN_SEVERITY_RANK = 99


class Interaction(Base):
    """A known interaction between two substances. Order of a/b carries no meaning."""

    __tablename__ = "interactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    substance_a: Mapped[str] = mapped_column(String(200), index=True)
    substance_a_type: Mapped[str] = mapped_column(String(20))
    substance_b: Mapped[str] = mapped_column(String(200), index=True)
    substance_b_type: Mapped[str] = mapped_column(String(20))
    severity: Mapped[str] = mapped_column(String(20))
    description: Mapped[str] = mapped_column(Text)
    mechanism: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendation: Mapped[str] = mapped_column(Text)
    evidence: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sources: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def severity_rank(self) -> int:
        return SEVERITY_ORDER.get(self.severity, UNKNOWN_SEVERITY_RANK)
