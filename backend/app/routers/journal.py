"""
Remedy tracking journal endpoints.

Every route needs a signed-in user on a plan that includes journal tracking.
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.repositories import JournalRepository
from core.services import get_effective_plan_limits, get_remedy_insights

from ..api.persistence import conflict_on_duplicate
from ..api.response import ApiError, ErrorCode, envelope
from ..auth.dependencies import get_current_user
from ..dependencies import get_journal_repository, rate_limit
from ..schemas import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalEntryUpdate,
    JournalListParams,
    UUIDStr,
    dump,
    dump_all,
    parse_query,
)

logger = get_logger("journal")

DUPLICATE_ENTRY_MESSAGE = "You already have a journal entry for this remedy on this date"


def require_journal_access(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
) -> User:
    limits, plan, is_trial = get_effective_plan_limits(db, current_user)
    if not limits.can_track_journal:
        raise ApiError(
            ErrorCode.FORBIDDEN,
            "Remedy tracking journal requires a Basic plan or higher",
            details={"plan": plan, "isTrial": is_trial},
        )
    return current_user


router = APIRouter(
    prefix="/journal",
    tags=["journal"],
    dependencies=[Depends(rate_limit("journal"))],
)


@router.get("")
def list_entries(
    request: Request,
    tracked: bool = False,
    repo: JournalRepository = Depends(get_journal_repository),
    user: User = Depends(require_journal_access),
):
    """Paginated entries, newest first, or the remedies being tracked."""
    if tracked:
        return envelope({"remedies": repo.list_tracked_remedies(user.id)})

    params = parse_query(JournalListParams, request)
    entries, total = repo.list_entries(
        user.id,
        remedy_id=params.remedy_id,
        start_date=params.start_date,
        end_date=params.end_date,
        offset=(params.page - 1) * params.page_size,
        limit=params.page_size,
    )
    return envelope(
        {
            "entries": dump_all(JournalEntryResponse, entries),
            "page": params.page,
            "pageSize": params.page_size,
            "total": total,
        },
        metadata={"page": params.page, "pageSize": params.page_size, "total": total},
    )


@router.get("/insights")
def remedy_insights(
    remedy_id: str | None = Query(None, alias="remedyId"),
    db: Session = Depends(get_db),
    user: User = Depends(require_journal_access),
):
    """Effectiveness summary over the last 90 days of entries for one remedy."""
    if not remedy_id:
        raise ApiError(ErrorCode.MISSING_PARAMETER, "Remedy ID is required")

    insights = get_remedy_insights(db, user.id, remedy_id)
    if insights is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "No journal entries found for this remedy")
    return envelope(insights)


@router.post("")
def create_entry(
    body: JournalEntryCreate,
    db: Session = Depends(get_db),
    repo: JournalRepository = Depends(get_journal_repository),
    user: User = Depends(require_journal_access),
):
    with conflict_on_duplicate(db, DUPLICATE_ENTRY_MESSAGE):
        entry = repo.create(user_id=user.id, **body.model_dump())

    logger.info("journal_entry_created", user_id=user.id, remedy_id=body.remedy_id)
    return envelope(
        {"entry": dump(JournalEntryResponse, entry), "message": "Journal entry created"},
        status_code=201,
    )


@router.put("")
def update_entry(
    body: JournalEntryUpdate,
    db: Session = Depends(get_db),
    repo: JournalRepository = Depends(get_journal_repository),
    user: User = Depends(require_journal_access),
):
    """Partial update; omitted fields keep their values."""
    entry = repo.get_for_user(body.id, user.id)
    if entry is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Journal entry not found")

    changes = body.model_dump(exclude={"id"}, exclude_unset=True)
    with conflict_on_duplicate(db, DUPLICATE_ENTRY_MESSAGE):
        for key, value in changes.items():
            setattr(entry, key, value)
        db.flush()

    return envelope(
        {"entry": dump(JournalEntryResponse, entry), "message": "Journal entry updated"}
    )


@router.delete("")
def delete_entry(
    entry_id: UUIDStr = Query(alias="id"),
    repo: JournalRepository = Depends(get_journal_repository),
    user: User = Depends(require_journal_access),
):
    entry = repo.get_for_user(entry_id, user.id)
    if entry is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Journal entry not found")

    repo.delete(entry)
    return envelope({"message": "Journal entry deleted"})
