"""
Daily usage endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.repositories import SubscriptionRepository
from core.services import (
    can_perform_action,
    get_aggregate_usage,
    get_trial_status,
    get_usage_history,
    get_usage_summary,
    increment_usage,
)

from ..api.response import LIMIT_EXCEEDED, ApiError, envelope
from ..auth.dependencies import get_current_user
from ..dependencies import rate_limit
from ..schemas import UsageIncrementRequest

logger = get_logger("usage")

router = APIRouter(prefix="/usage", tags=["usage"], dependencies=[Depends(rate_limit("usage"))])


@router.get("")
def usage_summary(
    history: bool = False,
    aggregate: bool = False,
    days: int = Query(30, ge=1, le=90),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Today's usage against plan limits, with optional history and totals."""
    summary = get_usage_summary(db, user)
    subscription = SubscriptionRepository(db).get_by_user_id(user.id)
    trial = get_trial_status(user, subscription)

    data = {
        **summary,
        "trial": {
            "isActive": trial.is_active,
            "daysRemaining": trial.days_remaining,
            "isEligible": trial.is_eligible,
        },
    }
    if history:
        data["history"] = get_usage_history(db, user.id, days)
    if aggregate:
        data["aggregate"] = get_aggregate_usage(db, user.id, days)
    return envelope(data)


@router.post("")
def record_usage(
    body: UsageIncrementRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Count an action, refusing it once the daily limit is used up."""
    check = can_perform_action(db, user, body.type)
    if not check.allowed:
        logger.info("usage_limit_reached", user_id=user.id, usage_type=body.type)
        raise ApiError(
            LIMIT_EXCEEDED,
            f"You have reached your daily {body.type} limit",
            details={
                "currentUsage": check.current_usage,
                "limit": check.limit,
                "plan": check.plan,
            },
            status_code=429,
        )

    new_count, _, now_within = increment_usage(db, user, body.type, body.amount)
    return envelope({"recorded": True, "newCount": new_count, "limitReached": not now_within})
