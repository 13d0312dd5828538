"""
Health profile: the interests and constraints a user describes about themselves.
"""

from fastapi import APIRouter, Depends
from pydantic.alias_generators import to_camel

from core.logging import get_logger
from core.models import HEALTH_PROFILE_FIELDS, User
from core.repositories import HealthProfileRepository

from ..api.response import envelope
from ..auth.dependencies import get_current_user
from ..dependencies import get_health_profile_repository, rate_limit
from ..schemas import HealthProfileRequest, HealthProfileResponse, dump

logger = get_logger("health_profile")

router = APIRouter(
    prefix="/health-profile",
    tags=["health-profile"],
    dependencies=[Depends(rate_limit("general"))],
)


@router.get("")
def get_health_profile(
    repo: HealthProfileRepository = Depends(get_health_profile_repository),
    user: User = Depends(get_current_user),
):
    """The stored profile, or empty lists when none has been saved."""
    profile = repo.get_for_user(user.id)
    if profile is None:
        return envelope({"profile": {to_camel(field): [] for field in HEALTH_PROFILE_FIELDS}})
    return envelope({"profile": dump(HealthProfileResponse, profile)})


@router.put("")
def update_health_profile(
    body: HealthProfileRequest,
    repo: HealthProfileRepository = Depends(get_health_profile_repository),
    user: User = Depends(get_current_user),
):
    profile = repo.upsert(user.id, **body.model_dump())
    logger.info("health_profile_updated", user_id=user.id)
    return envelope(
        {"profile": dump(HealthProfileResponse, profile), "message": "Health profile updated"}
    )
