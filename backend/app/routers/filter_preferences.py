"""
Saved search filter endpoints.
"""

from fastapi import APIRouter, Depends, Query

from core.models import User
from core.repositories import FilterPreferenceRepository

from ..api.response import ApiError, ErrorCode, envelope
from ..auth.authorization import verify_ownership
from ..auth.dependencies import get_optional_user
from ..dependencies import get_filter_preference_repository, rate_limit
from ..schemas import FilterPreferencesRequest, FilterPreferencesResponse, UUIDStr, dump

DEFAULT_PREFERENCES = FilterPreferencesResponse().model_dump(by_alias=True)

router = APIRouter(
    prefix="/filter-preferences",
    tags=["filter-preferences"],
    dependencies=[Depends(rate_limit("filterPreferences"))],
)


def _require_owner(session_id: str | None, user_id: str | None) -> None:
    if not session_id and not user_id:
        raise ApiError(ErrorCode.MISSING_PARAMETER, "Either sessionId or userId must be provided")


@router.get("")
def get_filter_preferences(
    session_id: UUIDStr | None = Query(None, alias="sessionId"),
    user_id: str | None = Query(None, alias="userId"),
    repo: FilterPreferenceRepository = Depends(get_filter_preference_repository),
    current_user: User | None = Depends(get_optional_user),
):
    """Stored preferences, or the defaults flagged with ``isDefault``."""
    _require_owner(session_id, user_id)
    verify_ownership(current_user, user_id, session_id)

    preferences = repo.get_for_owner(session_id, user_id)
    if preferences is None:
        return envelope({"preferences": dict(DEFAULT_PREFERENCES), "isDefault": True})
    return envelope(
        {"preferences": dump(FilterPreferencesResponse, preferences), "isDefault": False}
    )


@router.post("")
def save_filter_preferences(
    body: FilterPreferencesRequest,
    repo: FilterPreferenceRepository = Depends(get_filter_preference_repository),
    current_user: User | None = Depends(get_optional_user),
):
    _require_owner(body.session_id, body.user_id)
    verify_ownership(current_user, body.user_id, body.session_id)

    preferences = repo.upsert(
        body.session_id,
        body.user_id,
        categories=body.categories,
        nutrients=body.nutrients,
        evidence_levels=list(body.evidence_levels),
        sort_by=body.sort_by,
        sort_order=body.sort_order,
    )
    return envelope(
        {
            "preferences": dump(FilterPreferencesResponse, preferences),
            "message": "Filter preferences saved successfully",
        },
        status_code=201,
    )


@router.delete("")
def clear_filter_preferences(
    session_id: UUIDStr | None = Query(None, alias="sessionId"),
    user_id: str | None = Query(None, alias="userId"),
    repo: FilterPreferenceRepository = Depends(get_filter_preference_repository),
    current_user: User | None = Depends(get_optional_user),
):
    _require_owner(session_id, user_id)
    verify_ownership(current_user, user_id, session_id)

    repo.clear_for_owner(session_id, user_id)
    return envelope({"message": "Filter preferences cleared successfully"})
