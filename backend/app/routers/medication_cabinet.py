"""
Medication cabinet endpoints.

A signed-in user's medications and supplements, and the interactions among
the active ones.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.plans import is_within_limit
from core.repositories import MedicationRepository
from core.services import InteractionService, get_effective_plan_limits

from ..api.persistence import conflict_on_duplicate
from ..api.response import ApiError, ErrorCode, envelope
from ..auth.dependencies import get_current_user
from ..dependencies import get_interaction_service, get_medication_repository, rate_limit
from ..schemas import (
    MedicationCreate,
    MedicationResponse,
    MedicationUpdate,
    UUIDStr,
    dump,
    dump_all,
)

logger = get_logger("medication_cabinet")

DUPLICATE_MEDICATION_MESSAGE = "This medication is already in your cabinet"

router = APIRouter(
    prefix="/medication-cabinet",
    tags=["medication-cabinet"],
    dependencies=[Depends(rate_limit("medicationCabinet"))],
)


@router.get("")
def list_medications(
    repo: MedicationRepository = Depends(get_medication_repository),
    user: User = Depends(get_current_user),
):
    medications = repo.list_for_user(user.id)
    return envelope(
        {"medications": dump_all(MedicationResponse, medications), "count": len(medications)},
        metadata={"total": len(medications)},
    )


@router.get("/interactions")
def cabinet_interactions(
    db: Session = Depends(get_db),
    repo: MedicationRepository = Depends(get_medication_repository),
    service: InteractionService = Depends(get_interaction_service),
    user: User = Depends(get_current_user),
):
    """Pairwise interactions among the user's active medications."""
    limits, plan, is_trial = get_effective_plan_limits(db, user)
    if not limits.can_view_cabinet_interactions:
        raise ApiError(
            ErrorCode.FORBIDDEN,
            "Cabinet interaction checking requires a Basic plan or higher",
            details={"plan": plan, "isTrial": is_trial},
        )

    names = repo.active_names(user.id)
    interactions = service.check_multiple(names) if len(names) >= 2 else []
    return envelope(
        {"interactions": interactions, "count": len(interactions)},
        metadata={"total": len(interactions)},
    )


@router.post("")
def add_medication(
    body: MedicationCreate,
    db: Session = Depends(get_db),
    repo: MedicationRepository = Depends(get_medication_repository),
    user: User = Depends(get_current_user),
):
    limits, plan, _ = get_effective_plan_limits(db, user)
    current = repo.count_for_user(user.id)
    if not is_within_limit(limits.max_medications, current):
        raise ApiError(
            ErrorCode.FORBIDDEN,
            f"You've reached the maximum of {limits.max_medications} medications "
            f"on your {plan} plan. Upgrade for more.",
            details={"limit": limits.max_medications, "current": current, "plan": plan},
        )

    with conflict_on_duplicate(db, DUPLICATE_MEDICATION_MESSAGE):
        medication = repo.create(user_id=user.id, **body.model_dump())

    logger.info("medication_added", user_id=user.id, type=body.type)
    return envelope(
        {"medication": dump(MedicationResponse, medication), "message": "Medication added"},
        status_code=201,
    )


@router.put("")
def update_medication(
    body: MedicationUpdate,
    db: Session = Depends(get_db),
    repo: MedicationRepository = Depends(get_medication_repository),
    user: User = Depends(get_current_user),
):
    medication = repo.get_for_user(body.id, user.id)
    if medication is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Medication not found")

    changes = body.model_dump(exclude={"id"}, exclude_unset=True)
    with conflict_on_duplicate(db, DUPLICATE_MEDICATION_MESSAGE):
        for key, value in changes.items():
            setattr(medication, key, value)
        db.flush()

    return envelope(
        {"medication": dump(MedicationResponse, medication), "message": "Medication updated"}
    )


@router.delete("")
def remove_medication(
    medication_id: UUIDStr = Query(alias="id"),
    repo: MedicationRepository = Depends(get_medication_repository),
    user: User = Depends(get_current_user),
):
    medication = repo.get_for_user(medication_id, user.id)
    if medication is None:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "Medication not found")

    repo.delete(medication)
    return envelope({"message": "Medication removed"})
