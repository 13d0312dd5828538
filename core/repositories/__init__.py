"""
Repository pattern implementations for data access.

Repositories flush but never commit; the session owner commits.

Usage:
    from core.repositories import FavoriteRepository
    from core.db import db

    with db.session() as session:
        repo = FavoriteRepository(session)
        favorites = repo.list_for_owner(session_id=session_id)
"""

from .base import BaseRepository, OwnedRepository, is_unique_violation
from .favorite_repository import FavoriteRepository
from .health_profile_repository import HealthProfileRepository
from .interaction_repository import InteractionRepository, sort_by_severity
from .journal_repository import JournalRepository
from .medication_repository import MedicationRepository
from .remedy_repository import ContributionRepository, RemedyRepository
from .review_repository import ReviewRepository
from .search_repository import FilterPreferenceRepository, SearchHistoryRepository
from .subscription_repository import SubscriptionRepository, UsageRepository
from .user_repository import TokenBlacklistRepository, UserRepository

__all__ = [
    "BaseRepository",
    "OwnedRepository",
    "is_unique_violation",
    "UserRepository",
    "TokenBlacklistRepository",
    "SubscriptionRepository",
    "UsageRepository",
    "FavoriteRepository",
    "JournalRepository",
    "MedicationRepository",
    "SearchHistoryRepository",
    "FilterPreferenceRepository",
    "RemedyRepository",
    "ContributionRepository",
    "ReviewRepository",
    "HealthProfileRepository",
    "InteractionRepository",
    "sort_by_severity",
]
