"""Natural remedy and contribution repositories."""

from sqlalchemy import func, or_

from core.db import utcnow
from core.models import (
    CONTRIBUTION_APPROVED,
    CONTRIBUTION_PENDING,
    NaturalRemedy,
    RemedyContribution,
)

from .base import BaseRepository

SEARCH_RESULT_LIMIT = 20


class RemedyRepository(BaseRepository[NaturalRemedy]):
    """Remedy catalogue."""

    model = NaturalRemedy

    def search(
        self,
        query: str,
        evidence_level: str | None = None,
        min_similarity: float | None = None,
        limit: int = SEARCH_RESULT_LIMIT,
        offset: int = 0,
    ) -> tuple[list[NaturalRemedy], int]:
        """Case-insensitive substring match on name, description or category."""
        needle = query.lower()
        q = self.session.query(NaturalRemedy).filter(
            or_(
                func.lower(NaturalRemedy.name).contains(needle, autoescape=True),
                func.lower(NaturalRemedy.description).contains(needle, autoescape=True),
                func.lower(NaturalRemedy.category).contains(needle, autoescape=True),
            )
        )
        if evidence_level and evidence_level != "All":
            q = q.filter(NaturalRemedy.evidence_level == evidence_level)
        if min_similarity is not None:
            q = q.filter(NaturalRemedy.similarity_score >= min_similarity)

        total = q.count()
        remedies = (
            q.order_by(NaturalRemedy.similarity_score.desc(), NaturalRemedy.name.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return remedies, total

    def get_many(self, ids: list[str]) -> dict[str, NaturalRemedy]:
        """Remedies keyed by ID; unknown IDs are simply absent."""
        if not ids:
            return {}
        rows = self.session.query(NaturalRemedy).filter(NaturalRemedy.id.in_(ids)).all()
        return {remedy.id: remedy for remedy in rows}

    def get_all_categories(self) -> list[str]:
        rows = (
            self.session.query(NaturalRemedy.category)
            .distinct()
            .order_by(NaturalRemedy.category)
            .all()
        )
        return [category for (category,) in rows if category]

    def get_all_evidence_levels(self) -> list[str]:
        rows = (
            self.session.query(NaturalRemedy.evidence_level)
            .filter(NaturalRemedy.evidence_level.isnot(None))
            .distinct()
            .order_by(NaturalRemedy.evidence_level)
            .all()
        )
        return [level for (level,) in rows]


class ContributionRepository(BaseRepository[RemedyContribution]):
    """User-submitted remedies and their moderation state."""

    model = RemedyContribution

    def list_contributions(
        self,
        status: str | None = None,
        user_id: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[RemedyContribution], int]:
        query = self.session.query(RemedyContribution)
        if status:
            query = query.filter(RemedyContribution.status == status)
        if user_id:
            query = query.filter(RemedyContribution.user_id == user_id)

        total = query.count()
        items = (
            query.order_by(RemedyContribution.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def list_pending(self, limit: int = 50) -> list[RemedyContribution]:
        return (
            self.session.query(RemedyContribution)
            .filter(RemedyContribution.status == CONTRIBUTION_PENDING)
            .order_by(RemedyContribution.created_at.asc())
            .limit(limit)
            .all()
        )

    def mark_moderated(
        self,
        contribution: RemedyContribution,
        status: str,
        moderator_id: str,
        note: str | None = None,
    ) -> RemedyContribution:
        contribution.status = status
        contribution.moderator_note = note
        contribution.moderated_by = moderator_id
        contribution.moderated_at = utcnow()
        self.session.flush()
        return contribution

    def approve(
        self, contribution: RemedyContribution, moderator_id: str, note: str | None = None
    ) -> NaturalRemedy:
        """Publish the contribution to the catalogue as a Traditional-evidence remedy."""
        remedy = NaturalRemedy(
            name=contribution.name,
            description=contribution.description,
            category=contribution.category,
            image_url=contribution.image_url,
            matching_nutrients=list(contribution.ingredients or []),
            evidence_level="Traditional",
            usage=contribution.usage,
            dosage=contribution.dosage,
            precautions=contribution.precautions,
            scientific_info=contribution.scientific_info,
            references=[{"title": ref} for ref in contribution.references or []],
        )
        self.session.add(remedy)
        self.mark_moderated(contribution, CONTRIBUTION_APPROVED, moderator_id, note)
        return remedy
