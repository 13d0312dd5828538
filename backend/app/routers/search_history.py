"""
Search history endpoints.
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.db import get_db
from core.models import User
from core.repositories import SearchHistoryRepository
from core.services import get_effective_plan_limits

from ..api.response import ApiError, ErrorCode, envelope
from ..auth.authorization import verify_ownership
from ..auth.dependencies import get_optional_user
from ..dependencies import get_search_history_repository, rate_limit
from ..schemas import (
    GetSearchHistoryParams,
    PopularSearchParams,
    SaveSearchHistoryRequest,
    SearchHistoryResponse,
    UUIDStr,
    dump_all,
    parse_query,
)

OWNER_REQUIRED_MESSAGE = "Either sessionId or userId must be provided"

router = APIRouter(
    prefix="/search-history",
    tags=["search-history"],
    dependencies=[Depends(rate_limit("searchHistory"))],
)


def _require_owner(session_id: str | None, user_id: str | None) -> None:
    if not session_id and not user_id:
        raise ApiError(ErrorCode.MISSING_PARAMETER, OWNER_REQUIRED_MESSAGE)


@router.get("")
def get_search_history(
    request: Request,
    popular: bool = False,
    db: Session = Depends(get_db),
    repo: SearchHistoryRepository = Depends(get_search_history_repository),
    current_user: User | None = Depends(get_optional_user),
):
    """
    Recent searches for a session or user.

    ``popular=true`` instead returns the most common queries across everyone
    and needs no owner or plan.
    """
    if popular:
        top = parse_query(PopularSearchParams, request)
        return envelope({"popular": repo.popular_queries(top.limit)})

    params = parse_query(GetSearchHistoryParams, request)
    _require_owner(params.session_id, params.user_id)
    verify_ownership(current_user, params.user_id, params.session_id)

    if current_user is None:
        raise ApiError(ErrorCode.FORBIDDEN, "Search history requires a Basic plan or higher.")
    limits, plan, is_trial = get_effective_plan_limits(db, current_user)
    if not limits.can_access_history:
        raise ApiError(
            ErrorCode.FORBIDDEN,
            "Search history requires a Basic plan or higher.",
            details={"plan": plan, "isTrial": is_trial},
        )

    history = repo.list_for_owner(params.session_id, params.user_id, limit=params.limit)
    return envelope(
        {"history": dump_all(SearchHistoryResponse, history), "count": len(history)}
    )


@router.post("")
def save_search(
    body: SaveSearchHistoryRequest,
    repo: SearchHistoryRepository = Depends(get_search_history_repository),
    current_user: User | None = Depends(get_optional_user),
):
    _require_owner(body.session_id, body.user_id)
    verify_ownership(current_user, body.user_id, body.session_id)

    repo.create(
        query=body.query,
        results_count=body.results_count,
        filters=body.filters,
        session_id=body.session_id,
        user_id=body.user_id,
    )
    return envelope({"message": "Search history saved successfully"}, status_code=201)


@router.delete("")
def clear_search_history(
    session_id: UUIDStr | None = Query(None, alias="sessionId"),
    user_id: str | None = Query(None, alias="userId"),
    repo: SearchHistoryRepository = Depends(get_search_history_repository),
    current_user: User | None = Depends(get_optional_user),
):
    _require_owner(session_id, user_id)
    verify_ownership(current_user, user_id, session_id)

    deleted = repo.clear_for_owner(session_id, user_id)
    return envelope(
        {"message": "Search history cleared successfully", "deletedCount": deleted}
    )
