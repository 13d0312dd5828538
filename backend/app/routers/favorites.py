"""
Favorite remedy endpoints.

Favorites belong to an anonymous browser session, a signed-in user, or both.
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.plans import is_within_limit
from core.repositories import FavoriteRepository
from core.services import get_effective_plan_limits

from ..api.persistence import conflict_on_duplicate
from ..api.response import ApiError, ErrorCode, envelope
from ..auth.authorization import verify_ownership, verify_resource_ownership
from ..auth.dependencies import get_optional_user
from ..dependencies import get_favorite_repository, rate_limit
from ..schemas import (
    AddFavoriteRequest,
    DeleteFavoriteParams,
    FavoriteResponse,
    UpdateFavoriteRequest,
    dump,
    dump_all,
    parse_query,
)

logger = get_logger("favorites")

router = APIRouter(
    prefix="/favorites",
    tags=["favorites"],
    dependencies=[Depends(rate_limit("favorites"))],
)


def _check_favorites_quota(db: Session, user: User) -> None:
    limits, plan, _ = get_effective_plan_limits(db, user)
    current = FavoriteRepository(db).count_for_user(user.id)
    if not is_within_limit(limits.max_favorites, current):
        raise ApiError(
            ErrorCode.FORBIDDEN,
            f"You've reached the maximum of {limits.max_favorites} favorites "
            f"on your {plan} plan. Upgrade for more.",
            details={"limit": limits.max_favorites, "current": current, "plan": plan},
        )


@router.get("")
def list_favorites(
    session_id: str | None = Query(None, alias="sessionId"),
    user_id: str | None = Query(None, alias="userId"),
    collection_name: str | None = Query(None, alias="collectionName"),
    collections: bool = False,
    check: str | None = None,
    repo: FavoriteRepository = Depends(get_favorite_repository),
    current_user: User | None = Depends(get_optional_user),
):
    """
    List favorites for a session and/or user.

    ``collections=true`` returns the collection names instead and
    ``check=<remedyId>`` reports whether one remedy is saved.
    """
    verify_ownership(current_user, user_id, session_id)

    if collections:
        return envelope({"collections": repo.list_collections(session_id, user_id)})

    if check:
        favorite = repo.get_for_remedy(check, session_id, user_id)
        return envelope(
            {
                "isFavorite": favorite is not None,
                "remedyId": check,
                "favorite": dump(FavoriteResponse, favorite) if favorite else None,
            }
        )

    favorites = repo.list_for_owner(session_id, user_id, collection_name)
    return envelope(
        {"favorites": dump_all(FavoriteResponse, favorites), "count": len(favorites)},
        metadata={"total": len(favorites)},
    )


@router.post("")
def add_favorite(
    body: AddFavoriteRequest,
    db: Session = Depends(get_db),
    repo: FavoriteRepository = Depends(get_favorite_repository),
    current_user: User | None = Depends(get_optional_user),
):
    """Save a remedy. Signed-in users are held to their plan's favorites quota."""
    verify_ownership(current_user, body.user_id, body.session_id)

    owner_id = body.user_id or (current_user.id if current_user else None)
    if not body.session_id and not owner_id:
        raise ApiError(ErrorCode.INVALID_INPUT, "Either sessionId or userId must be provided")

    if current_user is not None:
        _check_favorites_quota(db, current_user)

    with conflict_on_duplicate(db, "This remedy is already in your favorites"):
        favorite = repo.create(
            remedy_id=body.remedy_id,
            remedy_name=body.remedy_name,
            session_id=body.session_id,
            user_id=owner_id,
            notes=body.notes,
            collection_name=body.collection_name,
        )

    logger.info("favorite_added", remedy_id=body.remedy_id, user_id=owner_id)
    return envelope(
        {"favorite": dump(FavoriteResponse, favorite), "message": "Remedy added to favorites"},
        status_code=201,
    )


@router.put("")
def update_favorite(
    body: UpdateFavoriteRequest,
    repo: FavoriteRepository = Depends(get_favorite_repository),
    current_user: User | None = Depends(get_optional_user),
):
    """Change the notes or collection of a saved remedy."""
    favorite = repo.get_by_id(body.id)
    if favorite is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Favorite not found")
    verify_resource_ownership(current_user, favorite.user_id, favorite.session_id, body.session_id)

    repo.update(favorite, notes=body.notes, collection_name=body.collection_name)
    return envelope(
        {
            "favorite": dump(FavoriteResponse, favorite),
            "message": "Favorite updated successfully",
        }
    )


@router.delete("")
def delete_favorite(
    request: Request,
    repo: FavoriteRepository = Depends(get_favorite_repository),
    current_user: User | None = Depends(get_optional_user),
):
    params = parse_query(DeleteFavoriteParams, request)
    favorite = repo.get_by_id(params.id)
    if favorite is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Favorite not found")
    verify_resource_ownership(
        current_user, favorite.user_id, favorite.session_id, params.session_id
    )

    repo.delete(favorite)
    logger.info("favorite_removed", favorite_id=params.id)
    return envelope({"message": "Favorite removed successfully"})
