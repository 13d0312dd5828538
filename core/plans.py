"""
Subscription plan catalogue and feature limits.

A limit of -1 means unlimited. Unknown plan names resolve to the free tier.
"""

from dataclasses import asdict, dataclass, field

PLAN_FREE = "free"
PLAN_BASIC = "basic"
PLAN_PREMIUM = "premium"
PLAN_TYPES = (PLAN_FREE, PLAN_BASIC, PLAN_PREMIUM)

UNLIMITED = -1


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class PlanLimits:
    """Feature gates and quotas for one plan."""

    max_favorites: int
    max_searches_per_day: int
    max_ai_searches_per_day: int
    can_export: bool
    can_compare: bool
    max_compare_items: int
    can_access_history: bool
    priority_support: bool
    max_medications: int
    can_view_cabinet_interactions: bool
    has_personalized_search: bool
    can_track_journal: bool
    max_reports_per_month: int

    def to_dict(self) -> dict:
        """camelCase keys, as the API returns them."""
        return {_camel(key): value for key, value in asdict(self).items()}


@dataclass(frozen=True)
class Plan:
    """Catalogue entry for a plan."""

    id: str
    name: str
    description: str
    monthly_price: float
    yearly_price: float
    features: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "monthlyPrice": self.monthly_price,
            "yearlyPrice": self.yearly_price,
            "features": list(self.features),
        }


# =============================================================================
# Limits
# =============================================================================

PLAN_LIMITS: dict[str, PlanLimits] = {
    PLAN_FREE: PlanLimits(
        max_favorites=3,
        max_searches_per_day=5,
        max_ai_searches_per_day=0,
        can_export=False,
        can_compare=False,
        max_compare_items=0,
        can_access_history=False,
        priority_support=False,
        max_medications=3,
        can_view_cabinet_interactions=False,
        has_personalized_search=False,
        can_track_journal=False,
        max_reports_per_month=0,
    ),
    PLAN_BASIC: PlanLimits(
        max_favorites=50,
        max_searches_per_day=100,
        max_ai_searches_per_day=10,
        can_export=True,
        can_compare=True,
        max_compare_items=4,
        can_access_history=True,
        priority_support=False,
        max_medications=20,
        can_view_cabinet_interactions=True,
        has_personalized_search=True,
        can_track_journal=True,
        max_reports_per_month=2,
    ),
    PLAN_PREMIUM: PlanLimits(
        max_favorites=UNLIMITED,
        max_searches_per_day=UNLIMITED,
        max_ai_searches_per_day=50,
        can_export=True,
        can_compare=True,
        max_compare_items=10,
        can_access_history=True,
        priority_support=True,
        max_medications=UNLIMITED,
        can_view_cabinet_interactions=True,
        has_personalized_search=True,
        can_track_journal=True,
        max_reports_per_month=UNLIMITED,
    ),
}


# =============================================================================
# Catalogue
# =============================================================================

PLANS: dict[str, Plan] = {
    PLAN_FREE: Plan(
        id=PLAN_FREE,
        name="Free",
        description="Get started with natural remedy discovery",
        monthly_price=0,
        yearly_price=0,
        features=[
            "5 searches per day",
            "Save up to 3 favorites",
            "Basic remedy information",
            "Track up to 3 medications",
        ],
    ),
    PLAN_BASIC: Plan(
        id=PLAN_BASIC,
        name="Basic",
        description="For regular users exploring natural alternatives",
        monthly_price=9.99,
        yearly_price=95.90,
        features=[
            "100 searches per day",
            "10 AI-powered searches per day",
            "Save up to 50 favorites",
            "Search history",
            "Compare up to 4 remedies",
            "Export data",
            "Remedy tracking journal",
            "Medication interaction alerts",
        ],
    ),
    PLAN_PREMIUM: Plan(
        id=PLAN_PREMIUM,
        name="Premium",
        description="Complete access for health enthusiasts",
        monthly_price=19.99,
        yearly_price=191.90,
        features=[
            "Unlimited searches",
            "50 AI-powered searches per day",
            "Unlimited favorites",
            "Compare up to 10 remedies",
            "Unlimited medication cabinet",
            "Unlimited reports",
            "Priority support",
        ],
    ),
}


# =============================================================================
# Helpers
# =============================================================================


def parse_plan_type(value: str | None) -> str:
    """Normalize a stored or user-supplied plan name; anything unknown is free."""
    if not value:
        return PLAN_FREE
    normalized = value.strip().lower()
    return normalized if normalized in PLAN_TYPES else PLAN_FREE


def get_plan_limits(plan: str | None) -> PlanLimits:
    return PLAN_LIMITS[parse_plan_type(plan)]


def get_plan(plan: str | None) -> Plan:
    return PLANS[parse_plan_type(plan)]


def is_within_limit(limit: int, usage: int) -> bool:
    return limit == UNLIMITED or usage < limit


def get_usage_percentage(limit: int, usage: int) -> int:
    """0 for unlimited plans, 100 when the feature is not included at all."""
    if limit == UNLIMITED:
        return 0
    if limit == 0:
        return 100
    return min(100, round(usage / limit * 100))


__all__ = [
    "PLAN_FREE",
    "PLAN_BASIC",
    "PLAN_PREMIUM",
    "PLAN_TYPES",
    "UNLIMITED",
    "PlanLimits",
    "Plan",
    "PLAN_LIMITS",
    "PLANS",
    "parse_plan_type",
    "get_plan_limits",
    "get_plan",
    "is_within_limit",
    "get_usage_percentage",
]
