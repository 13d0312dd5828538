"""
Free trial lifecycle and effective-plan resolution.

Every user gets one 7-day premium trial. While it runs the subscription row
is premium/trialing; when it lapses the scheduler moves it back to free.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from core.db import as_utc, utcnow
from core.logging import get_logger
from core.models import STATUS_ACTIVE, STATUS_TRIALING, Subscription, User
from core.plans import PLAN_FREE, PLAN_PREMIUM, PlanLimits, get_plan_limits, parse_plan_type
from core.repositories import SubscriptionRepository

logger = get_logger("service.trial")

TRIAL_DURATION_DAYS = 7
TRIAL_PLAN = PLAN_PREMIUM


class TrialNotEligibleError(Exception):
    """Raised when a user who already used their trial tries to start another."""

    def __init__(self, message: str = "User is not eligible for a free trial"):
        super().__init__(message)


@dataclass
class TrialStatus:
    is_active: bool
    is_eligible: bool
    days_remaining: int
    start_date: datetime | None
    end_date: datetime | None
    has_used_trial: bool

    def to_dict(self) -> dict:
        return {
            "isActive": self.is_active,
            "isEligible": self.is_eligible,
            "daysRemaining": self.days_remaining,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "hasUsedTrial": self.has_used_trial,
        }


def is_trial_eligible(user: User | None) -> bool:
    return user is not None and not user.has_used_trial


def get_trial_status(
    user: User | None, subscription: Subscription | None, now: datetime | None = None
) -> TrialStatus:
    now = now or utcnow()
    if user is None:
        return TrialStatus(False, False, 0, None, None, False)

    end_date = as_utc(user.trial_end_date)
    is_active = (
        end_date is not None
        and end_date > now
        and subscription is not None
        and subscription.status == STATUS_TRIALING
    )
    days_remaining = 0
    if is_active and end_date is not None:
        days_remaining = max(0, math.ceil((end_date - now).total_seconds() / 86400))

    return TrialStatus(
        is_active=is_active,
        is_eligible=is_trial_eligible(user),
        days_remaining=days_remaining,
        start_date=as_utc(user.trial_start_date),
        end_date=end_date,
        has_used_trial=bool(user.has_used_trial),
    )


def get_effective_plan(
    user: User | None, subscription: Subscription | None, now: datetime | None = None
) -> tuple[str, bool]:
    """
    Plan the user is entitled to right now, and whether it comes from a trial.

    A paid active subscription wins, then a running trial, else free.
    """
    if user is None:
        return PLAN_FREE, False
    if subscription is not None and subscription.status == STATUS_ACTIVE:
        return parse_plan_type(subscription.plan), False
    if get_trial_status(user, subscription, now).is_active:
        return TRIAL_PLAN, True
    return PLAN_FREE, False


def get_effective_plan_limits(
    session: Session, user: User | None, now: datetime | None = None
) -> tuple[PlanLimits, str, bool]:
    subscription = None
    if user is not None:
        subscription = SubscriptionRepository(session).get_by_user_id(user.id)
    plan, is_trial = get_effective_plan(user, subscription, now)
    return get_plan_limits(plan), plan, is_trial


def start_trial(session: Session, user: User, now: datetime | None = None) -> TrialStatus:
    """
    Mark the trial as used and put the subscription on premium/trialing.

    Both writes share the caller's transaction.
    """
    if not is_trial_eligible(user):
        raise TrialNotEligibleError()

    now = now or utcnow()
    end = now + timedelta(days=TRIAL_DURATION_DAYS)

    user.has_used_trial = True
    user.trial_start_date = now
    user.trial_end_date = end

    subscription = SubscriptionRepository(session).upsert(
        user.id,
        plan=TRIAL_PLAN,
        status=STATUS_TRIALING,
        current_period_end=end,
    )
    session.flush()

    logger.info("trial_started", user_id=user.id, ends_at=end.isoformat())
    return get_trial_status(user, subscription, now)


def process_expired_trials(session: Session, now: datetime | None = None) -> int:
    """Downgrade every trialing subscription whose period has ended. Returns the count."""
    now = now or utcnow()
    expired = SubscriptionRepository(session).trialing_ending_before(now)
    for subscription in expired:
        subscription.plan = PLAN_FREE
        subscription.status = STATUS_ACTIVE
        subscription.current_period_end = None
    session.flush()

    if expired:
        logger.info("trials_expired", count=len(expired))
    return len(expired)


def get_expiring_trials(
    session: Session, within_days: int = 2, now: datetime | None = None
) -> list[Subscription]:
    now = now or utcnow()
    return SubscriptionRepository(session).trialing_ending_between(
        now, now + timedelta(days=within_days)
    )


def cancel_trial(session: Session, user: User) -> bool:
    """Revert a trialing subscription to free. False when there was nothing to cancel."""
    repo = SubscriptionRepository(session)
    subscription = repo.get_by_user_id(user.id)
    if subscription is None or subscription.status != STATUS_TRIALING:
        return False

    repo.upsert(user.id, plan=PLAN_FREE, status=STATUS_ACTIVE, current_period_end=None)
    logger.info("trial_cancelled", user_id=user.id)
    return True


__all__ = [
    "TRIAL_DURATION_DAYS",
    "TRIAL_PLAN",
    "TrialNotEligibleError",
    "TrialStatus",
    "is_trial_eligible",
    "get_trial_status",
    "get_effective_plan",
    "get_effective_plan_limits",
    "start_trial",
    "process_expired_trials",
    "get_expiring_trials",
    "cancel_trial",
]
