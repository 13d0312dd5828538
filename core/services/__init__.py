"""
Core services: business rules that sit above the repositories.

Services take a Session (or repositories) and never commit; the caller owns
the transaction.
"""

from core.services.interaction_service import InteractionService, pair_count, serialize_interaction
from core.services.journal_service import build_insights, get_remedy_insights, rating_trend
from core.services.notification_service import notify_contribution_moderated
from core.services.remedy_service import to_detailed_remedy
from core.services.trial_service import (
    TrialNotEligibleError,
    TrialStatus,
    cancel_trial,
    get_effective_plan,
    get_effective_plan_limits,
    get_expiring_trials,
    get_trial_status,
    is_trial_eligible,
    process_expired_trials,
    start_trial,
)
from core.services.usage_service import (
    can_perform_action,
    get_aggregate_usage,
    get_usage_history,
    get_usage_summary,
    increment_usage,
)

__all__ = [
    "InteractionService",
    "serialize_interaction",
    "pair_count",
    "build_insights",
    "get_remedy_insights",
    "rating_trend",
    "notify_contribution_moderated",
    "to_detailed_remedy",
    "TrialNotEligibleError",
    "TrialStatus",
    "cancel_trial",
    "get_effective_plan",
    "get_effective_plan_limits",
    "get_expiring_trials",
    "get_trial_status",
    "is_trial_eligible",
    "process_expired_trials",
    "start_trial",
    "can_perform_action",
    "get_aggregate_usage",
    "get_usage_history",
    "get_usage_summary",
    "increment_usage",
]
