"""
Daily usage tracking against plan limits.

Counters are kept per user per UTC day. Exports share the search quota and
comparisons are capped by the plan's compare size.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from core.db import utcnow
from core.models import User
from core.plans import PlanLimits, get_usage_percentage, is_within_limit
from core.repositories import FavoriteRepository, UsageRepository

from .trial_service import get_effective_plan_limits

USAGE_LIMIT_FIELDS = {
    "searches": "max_searches_per_day",
    "aiSearches": "max_ai_searches_per_day",
    "comparisons": "max_compare_items",
    "exports": "max_searches_per_day",
}


@dataclass
class ActionCheck:
    allowed: bool
    current_usage: int
    limit: int
    plan: str


def utc_today(now: datetime | None = None) -> date:
    return (now or utcnow()).date()


def limit_for(limits: PlanLimits, usage_type: str) -> int:
    return getattr(limits, USAGE_LIMIT_FIELDS[usage_type])


def get_today_usage(session: Session, user_id: str, now: datetime | None = None) -> dict[str, int]:
    record = UsageRepository(session).get_for_day(user_id, utc_today(now))
    if record is None:
        return {usage_type: 0 for usage_type in USAGE_LIMIT_FIELDS}
    return {usage_type: record.get_count(usage_type) for usage_type in USAGE_LIMIT_FIELDS}


def increment_usage(
    session: Session, user: User, usage_type: str, amount: int = 1, now: datetime | None = None
) -> tuple[int, bool, bool]:
    """
    Add to today's counter.

    Returns:
        (new_count, was_within_limit, is_now_within_limit)
    """
    limits, _, _ = get_effective_plan_limits(session, user, now)
    limit = limit_for(limits, usage_type)

    record = UsageRepository(session).increment(user.id, utc_today(now), usage_type, amount)
    new_count = record.get_count(usage_type)
    was_within = is_within_limit(limit, new_count - amount)
    return new_count, was_within, is_within_limit(limit, new_count)


def can_perform_action(
    session: Session, user: User, usage_type: str, now: datetime | None = None
) -> ActionCheck:
    limits, plan, _ = get_effective_plan_limits(session, user, now)
    limit = limit_for(limits, usage_type)
    current = get_today_usage(session, user.id, now)[usage_type]
    return ActionCheck(
        allowed=is_within_limit(limit, current), current_usage=current, limit=limit, plan=plan
    )


def _meter(limit: int, used: int) -> dict:
    return {
        "used": used,
        "limit": limit,
        "percentage": get_usage_percentage(limit, used),
        "isWithinLimit": is_within_limit(limit, used),
    }


def get_usage_summary(session: Session, user: User, now: datetime | None = None) -> dict:
    limits, plan, is_trial = get_effective_plan_limits(session, user, now)
    usage = get_today_usage(session, user.id, now)
    favorites = FavoriteRepository(session).count_for_user(user.id)

    return {
        "plan": plan,
        "isTrial": is_trial,
        "searches": _meter(limits.max_searches_per_day, usage["searches"]),
        "aiSearches": _meter(limits.max_ai_searches_per_day, usage["aiSearches"]),
        "favorites": _meter(limits.max_favorites, favorites),
        "comparisons": _meter(limits.max_compare_items, usage["comparisons"]),
    }


def get_usage_history(
    session: Session, user_id: str, days: int = 30, now: datetime | None = None
) -> list[dict]:
    """Newest day first."""
    since = utc_today(now) - timedelta(days=days)
    records = UsageRepository(session).history(user_id, since)
    return [
        {
            "date": record.date.isoformat(),
            "searches": record.searches,
            "aiSearches": record.ai_searches,
            "exports": record.exports,
            "comparisons": record.comparisons,
        }
        for record in reversed(records)
    ]


def get_aggregate_usage(
    session: Session, user_id: str, days: int = 30, now: datetime | None = None
) -> dict:
    since = utc_today(now) - timedelta(days=days)
    records = UsageRepository(session).history(user_id, since)
    total_searches = sum(r.searches for r in records)
    return {
        "totalSearches": total_searches,
        "totalAiSearches": sum(r.ai_searches for r in records),
        "totalExports": sum(r.exports for r in records),
        "totalComparisons": sum(r.comparisons for r in records),
        "averageSearchesPerDay": round(total_searches / (len(records) or 1)),
    }


__all__ = [
    "USAGE_LIMIT_FIELDS",
    "ActionCheck",
    "utc_today",
    "limit_for",
    "get_today_usage",
    "increment_usage",
    "can_perform_action",
    "get_usage_summary",
    "get_usage_history",
    "get_aggregate_usage",
]
