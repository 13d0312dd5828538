"""
Community remedy contributions and the moderation queue for contributions and reviews.
"""

import math

from fastapi import APIRouter, Depends, Request

from core.cache import CacheKeys, cache
from core.logging import get_logger
from core.models import CONTRIBUTION_REJECTED, User
from core.repositories import ContributionRepository, ReviewRepository
from core.services import notify_contribution_moderated

from ..api.response import ApiError, ErrorCode, envelope
from ..auth.dependencies import get_current_user, require_moderator
from ..dependencies import get_contribution_repository, get_review_repository, rate_limit
from ..schemas import (
    ContributionCreate,
    ContributionListParams,
    ContributionResponse,
    ModerationRequest,
    ReviewResponse,
    UUIDStr,
    dump,
    dump_all,
    parse_query,
)

logger = get_logger("contributions")

router = APIRouter(prefix="/contributions", tags=["contributions"])
moderation_router = APIRouter(prefix="/admin/moderation", tags=["moderation"])

MODERATION_MESSAGES = {
    "approve": "Contribution approved",
    "reject": "Contribution rejected",
}


@router.get("", dependencies=[Depends(rate_limit("general"))])
def list_contributions(
    request: Request,
    repo: ContributionRepository = Depends(get_contribution_repository),
    user: User = Depends(get_current_user),
):
    """The caller's own submissions, newest first."""
    params = parse_query(ContributionListParams, request)
    items, total = repo.list_contributions(
        status=params.status,
        user_id=user.id,
        offset=(params.page - 1) * params.limit,
        limit=params.limit,
    )
    return envelope(
        {
            "contributions": dump_all(ContributionResponse, items),
            "pagination": {
                "page": params.page,
                "limit": params.limit,
                "total": total,
                "totalPages": math.ceil(total / params.limit),
            },
        }
    )


@router.post("", dependencies=[Depends(rate_limit("contributions"))])
def submit_contribution(
    body: ContributionCreate,
    repo: ContributionRepository = Depends(get_contribution_repository),
    user: User = Depends(get_current_user),
):
    """Queue a remedy for moderation."""
    values = body.model_dump(exclude={"references"})
    contribution = repo.create(
        user_id=user.id,
        references=[reference.flatten() for reference in body.references],
        **values,
    )

    logger.info("contribution_submitted", contribution_id=contribution.id, user_id=user.id)
    return envelope(
        {
            "contribution": dump(ContributionResponse, contribution),
            "message": "Contribution submitted for review",
        },
        status_code=201,
    )


# =============================================================================
# Moderation
# =============================================================================


@moderation_router.get("")
def moderation_queue(
    repo: ContributionRepository = Depends(get_contribution_repository),
    moderator: User = Depends(require_moderator),
):
    """Pending contributions, oldest first."""
    pending = repo.list_pending()
    return envelope(
        {"contributions": dump_all(ContributionResponse, pending), "count": len(pending)}
    )


@moderation_router.patch("/{item_id}")
def moderate(
    item_id: UUIDStr,
    body: ModerationRequest,
    repo: ContributionRepository = Depends(get_contribution_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
    moderator: User = Depends(require_moderator),
):
    """
    Approve or reject a contribution or a review.

    Approving a contribution publishes it to the catalogue; the submitter
    notification is best effort and never fails the action. Approving a
    review marks it verified and rejecting one deletes it.
    """
    if body.type == "review":
        return _moderate_review(item_id, body, reviews, moderator)

    contribution = repo.get_by_id(item_id)
    if contribution is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Contribution not found")

    remedy_id = None
    if body.action == "approve":
        remedy = repo.approve(contribution, moderator.id, body.note)
        remedy_id = remedy.id
        cache.delete(CacheKeys.remedy_categories())
    else:
        repo.mark_moderated(contribution, CONTRIBUTION_REJECTED, moderator.id, body.note)

    logger.info(
        "contribution_moderated",
        contribution_id=contribution.id,
        action=body.action,
        moderator_id=moderator.id,
    )

    try:
        notify_contribution_moderated(contribution, body.action, body.note)
    except Exception as e:
        logger.warning("notification_failed", contribution_id=contribution.id, error=str(e))

    return envelope(
        {
            "contribution": dump(ContributionResponse, contribution),
            "remedyId": remedy_id,
            "message": MODERATION_MESSAGES[body.action],
        }
    )


def _moderate_review(
    review_id: str, body: ModerationRequest, reviews: ReviewRepository, moderator: User
):
    review = reviews.get_by_id(review_id)
    if review is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Review not found")

    logger.info(
        "review_moderated", review_id=review.id, action=body.action, moderator_id=moderator.id
    )
    if body.action == "approve":
        reviews.verify(review)
        return envelope({"review": dump(ReviewResponse, review), "message": "Review verified"})

    reviews.delete(review)
    return envelope({"reviewId": review_id, "message": "Review removed"})
