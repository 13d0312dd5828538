"""
Subscription, effective plan and free trial endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import STATUS_ACTIVE, User
from core.plans import PLAN_BASIC, PLAN_FREE, get_plan, get_plan_limits, parse_plan_type
from core.repositories import SubscriptionRepository
from core.services import (
    TrialNotEligibleError,
    get_effective_plan,
    get_trial_status,
    start_trial,
)
from core.services.trial_service import TRIAL_PLAN

from ..api.response import TRIAL_NOT_ELIGIBLE, ApiError, envelope
from ..auth.dependencies import get_current_user, get_optional_user
from ..dependencies import get_subscription_repository, rate_limit

logger = get_logger("subscription")

UPGRADEABLE_PLANS = (PLAN_FREE, PLAN_BASIC)

router = APIRouter(tags=["subscription"], dependencies=[Depends(rate_limit("general"))])


@router.get("/subscription")
def get_subscription(
    repo: SubscriptionRepository = Depends(get_subscription_repository),
    user: User = Depends(get_current_user),
):
    """The stored subscription, or the implicit free one."""
    subscription = repo.get_by_user_id(user.id)
    if subscription is None:
        return envelope(
            {
                "plan": PLAN_FREE,
                "planDetails": get_plan(PLAN_FREE).to_dict(),
                "status": STATUS_ACTIVE,
                "isActive": True,
                "canUpgrade": True,
            }
        )

    plan = parse_plan_type(subscription.plan)
    return envelope(
        {
            "id": subscription.id,
            "plan": plan,
            "planDetails": get_plan(plan).to_dict(),
            "status": subscription.status,
            "interval": subscription.interval,
            "currentPeriodEnd": subscription.current_period_end,
            "cancelAtPeriodEnd": subscription.cancel_at_period_end,
            "isActive": subscription.is_active,
            "canUpgrade": plan in UPGRADEABLE_PLANS,
            "canManage": bool(subscription.provider_subscription_id),
        }
    )


@router.get("/plan")
def get_current_plan(
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    """Effective plan and its limits; anonymous callers get the free tier."""
    if user is None:
        return envelope(
            {"plan": PLAN_FREE, "isTrial": False, "limits": get_plan_limits(PLAN_FREE).to_dict()}
        )

    subscription = SubscriptionRepository(db).get_by_user_id(user.id)
    plan, is_trial = get_effective_plan(user, subscription)
    return envelope(
        {"plan": plan, "isTrial": is_trial, "limits": get_plan_limits(plan).to_dict()}
    )


@router.post("/trial/start")
def begin_trial(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        status = start_trial(db, user)
    except TrialNotEligibleError:
        logger.info("trial_rejected", user_id=user.id)
        raise ApiError(
            TRIAL_NOT_ELIGIBLE, "You have already used your free trial", status_code=400
        ) from None

    plan = get_plan(TRIAL_PLAN)
    return envelope(
        {
            "message": "Trial started successfully",
            "trialEndDate": status.end_date,
            "daysRemaining": status.days_remaining,
            "plan": plan.id,
            "features": list(plan.features),
        },
        status_code=201,
    )


@router.get("/trial/check")
def check_trial(
    db: Session = Depends(get_db),
    user: User | None = Depends(get_optional_user),
):
    """Trial status; anonymous visitors are reported as eligible."""
    if user is None:
        return envelope(
            {
                "isEligible": True,
                "isActive": False,
                "hasUsedTrial": False,
                "startDate": None,
                "endDate": None,
                "daysRemaining": 0,
            }
        )

    subscription = SubscriptionRepository(db).get_by_user_id(user.id)
    return envelope(get_trial_status(user, subscription).to_dict())
