"""
Remedy reviews: one rating and write-up per user per remedy.
"""

import math

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.repositories import ReviewRepository

from ..api.persistence import conflict_on_duplicate
from ..api.response import DUPLICATE_REVIEW, ApiError, ErrorCode, envelope
from ..auth.dependencies import get_optional_user
from ..dependencies import get_review_repository, rate_limit
from ..schemas import ReviewCreate, ReviewListParams, ReviewResponse, dump, dump_all, parse_query

logger = get_logger("reviews")

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this remedy"

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("", dependencies=[Depends(rate_limit("general"))])
def list_reviews(request: Request, repo: ReviewRepository = Depends(get_review_repository)):
    """A page of reviews for one remedy, newest first, with the rating summary."""
    if not request.query_params.get("remedyId"):
        raise ApiError(ErrorCode.MISSING_PARAMETER, "Remedy ID is required")
    params = parse_query(ReviewListParams, request)

    items, total = repo.list_for_remedy(
        params.remedy_id, offset=(params.page - 1) * params.limit, limit=params.limit
    )
    average, count = repo.rating_summary(params.remedy_id)
    return envelope(
        {
            "reviews": dump_all(ReviewResponse, items),
            "total": total,
            "page": params.page,
            "totalPages": math.ceil(total / params.limit),
            "averageRating": average,
            "totalReviews": count,
        }
    )


@router.post("", dependencies=[Depends(rate_limit("reviews"))])
def create_review(
    body: ReviewCreate,
    db: Session = Depends(get_db),
    repo: ReviewRepository = Depends(get_review_repository),
    user: User | None = Depends(get_optional_user),
):
    if user is None:
        raise ApiError(ErrorCode.UNAUTHORIZED, "You must be signed in to write a review")

    if repo.get_by_user_and_remedy(user.id, body.remedy_id) is not None:
        raise ApiError(DUPLICATE_REVIEW, DUPLICATE_REVIEW_MESSAGE, status_code=400)

    with conflict_on_duplicate(db, DUPLICATE_REVIEW_MESSAGE):
        review = repo.create(user_id=user.id, **body.model_dump())

    logger.info("review_created", review_id=review.id, remedy_id=review.remedy_id, user_id=user.id)
    return envelope(dump(ReviewResponse, review), status_code=201)
