"""
SQLAlchemy models for Remedi.

Single source of truth for all database models.

Usage:
    from core.models import User, Favorite, JournalEntry
"""

from .base import Base
from .favorite import Favorite
from .health_profile import HEALTH_PROFILE_FIELDS, HealthProfile
from .interaction import SEVERITY_ORDER, UNKNOWN_SEVERITY_RANK, Interaction
from .journal import JournalEntry
from .medication import MEDICATION_FREQUENCIES, MEDICATION_TYPES, Medication
from .remedy import (
    CONTRIBUTION_APPROVED,
    CONTRIBUTION_PENDING,
    CONTRIBUTION_REJECTED,
    CONTRIBUTION_STATUSES,
    EVIDENCE_LEVELS,
    NaturalRemedy,
    RemedyContribution,
)
from .review import RemedyReview
from .search import FilterPreference, SearchHistory
from .subscription import STATUS_ACTIVE, STATUS_TRIALING, Subscription
from .usage import USAGE_COLUMNS, USAGE_TYPES, UsageRecord
from .user import ROLE_ADMIN, ROLE_MODERATOR, ROLE_USER, USER_ROLES, TokenBlacklist, User

__all__ = [
    # Base
    "Base",
    # User
    "User",
    "TokenBlacklist",
    "ROLE_USER",
    "ROLE_MODERATOR",
    "ROLE_ADMIN",
    "USER_ROLES",
    # Subscription
    "Subscription",
    "STATUS_ACTIVE",
    "STATUS_TRIALING",
    # Favorites
    "Favorite",
    # Journal
    "JournalEntry",
    # Medication cabinet
    "Medication",
    "MEDICATION_TYPES",
    "MEDICATION_FREQUENCIES",
    # Search
    "SearchHistory",
    "FilterPreference",
    # Remedies
    "NaturalRemedy",
    "RemedyContribution",
    "EVIDENCE_LEVELS",
    "CONTRIBUTION_PENDING",
    "CONTRIBUTION_APPROVED",
    "CONTRIBUTION_REJECTED",
    "CONTRIBUTION_STATUSES",
    # Reviews
    "RemedyReview",
    # Health profile
    "HealthProfile",
    "HEALTH_PROFILE_FIELDS",
    # Interactions
    "Interaction",
    "SEVERITY_ORDER",
    "UNKNOWN_SEVERITY_RANK",
    # Usage
    "UsageRecord",
    "USAGE_TYPES",
    "USAGE_COLUMNS",
]
