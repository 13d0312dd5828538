"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Repositories
- Services
- Rate limiting
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from core.cache import CacheKeys
from core.db import get_db
from core.repositories import (
    ContributionRepository,
    FavoriteRepository,
    FilterPreferenceRepository,
    HealthProfileRepository,
    InteractionRepository,
    JournalRepository,
    MedicationRepository,
    RemedyRepository,
    ReviewRepository,
    SearchHistoryRepository,
    SubscriptionRepository,
    TokenBlacklistRepository,
    UserRepository,
)
from core.services import InteractionService

from .rate_limit import get_client_identifier, rate_limit

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_token_blacklist_repository(db: Session = Depends(get_db)) -> TokenBlacklistRepository:
    return TokenBlacklistRepository(db)


def get_subscription_repository(db: Session = Depends(get_db)) -> SubscriptionRepository:
    return SubscriptionRepository(db)


def get_favorite_repository(db: Session = Depends(get_db)) -> FavoriteRepository:
    return FavoriteRepository(db)


def get_journal_repository(db: Session = Depends(get_db)) -> JournalRepository:
    return JournalRepository(db)


def get_medication_repository(db: Session = Depends(get_db)) -> MedicationRepository:
    return MedicationRepository(db)


def get_search_history_repository(db: Session = Depends(get_db)) -> SearchHistoryRepository:
    return SearchHistoryRepository(db)


def get_filter_preference_repository(
    db: Session = Depends(get_db),
) -> FilterPreferenceRepository:
    return FilterPreferenceRepository(db)


def get_remedy_repository(db: Session = Depends(get_db)) -> RemedyRepository:
    return RemedyRepository(db)


def get_contribution_repository(db: Session = Depends(get_db)) -> ContributionRepository:
    return ContributionRepository(db)


def get_review_repository(db: Session = Depends(get_db)) -> ReviewRepository:
    return ReviewRepository(db)


def get_health_profile_repository(db: Session = Depends(get_db)) -> HealthProfileRepository:
    return HealthProfileRepository(db)


# =============================================================================
# Service Dependencies
# =============================================================================


def get_interaction_service(db: Session = Depends(get_db)) -> InteractionService:
    """InteractionService with hour-long cached lookups."""
    return InteractionService(InteractionRepository(db), ttl=CacheKeys.TTL_HOUR)


__all__ = [
    "get_user_repository",
    "get_token_blacklist_repository",
    "get_subscription_repository",
    "get_favorite_repository",
    "get_journal_repository",
    "get_medication_repository",
    "get_search_history_repository",
    "get_filter_preference_repository",
    "get_remedy_repository",
    "get_contribution_repository",
    "get_review_repository",
    "get_health_profile_repository",
    "get_interaction_service",
    "get_client_identifier",
    "rate_limit",
]
