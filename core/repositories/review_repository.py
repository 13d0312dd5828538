"""Remedy review repository."""

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from core.models import RemedyReview

from .base import BaseRepository


class ReviewRepository(BaseRepository[RemedyReview]):
    model = RemedyReview

    def get_by_user_and_remedy(self, user_id: str, remedy_id: str) -> RemedyReview | None:
        return (
            self.session.query(RemedyReview)
            .filter(RemedyReview.user_id == user_id, RemedyReview.remedy_id == remedy_id)
            .first()
        )

    def list_for_remedy(
        self, remedy_id: str, offset: int = 0, limit: int = 10
    ) -> tuple[list[RemedyReview], int]:
        """Newest first, with authors loaded. Returns (page, total)."""
        query = self.session.query(RemedyReview).filter(RemedyReview.remedy_id == remedy_id)
        total = query.count()
        items = (
            query.options(joinedload(RemedyReview.user))
            .order_by(RemedyReview.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def rating_summary(self, remedy_id: str) -> tuple[float, int]:
        """(average rating, review count); the average is 0 with no reviews."""
        average, count = (
            self.session.query(func.avg(RemedyReview.rating), func.count(RemedyReview.id))
            .filter(RemedyReview.remedy_id == remedy_id)
            .one()
        )
        return float(average or 0), count or 0

    def verify(self, review: RemedyReview) -> RemedyReview:
        review.verified = True
        self.session.flush()
        return review
