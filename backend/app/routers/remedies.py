"""
Remedy catalogue endpoints: detail, search, categories and comparison.
"""

import time

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from core.cache import CacheKeys, cache
from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.repositories import RemedyRepository
from core.services import get_effective_plan_limits, to_detailed_remedy

from ..api.response import LIMIT_EXCEEDED, ApiError, ErrorCode, ResponseMetadata, envelope
from ..auth.dependencies import get_current_user
from ..dependencies import get_remedy_repository, rate_limit
from ..schemas import (
    BatchParams,
    CompareParams,
    RemedyIdParams,
    RemedyResponse,
    SearchParams,
    dump_all,
    parse_query,
)

logger = get_logger("remedies")

API_VERSION = "1.0"

router = APIRouter(tags=["remedies"])


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


@router.get("/remedy/{remedy_id}", dependencies=[Depends(rate_limit("general"))])
def get_remedy(remedy_id: str, repo: RemedyRepository = Depends(get_remedy_repository)):
    """Full remedy record with placeholder text for missing sections."""
    started = time.perf_counter()
    params = RemedyIdParams.model_validate({"id": remedy_id})

    key = CacheKeys.remedy_detail(params.id)
    detail = cache.get_json(key)
    if detail is None:
        remedy = repo.get_by_id(params.id)
        if remedy is None:
            raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, f"Remedy with ID {params.id} not found")
        detail = to_detailed_remedy(remedy)
        cache.set_json(key, detail, CacheKeys.TTL_HOUR)
    return envelope(
        detail,
        metadata=ResponseMetadata(processing_time=_elapsed_ms(started), api_version=API_VERSION),
    )


@router.get("/search", dependencies=[Depends(rate_limit("search"))])
def search_remedies(request: Request, repo: RemedyRepository = Depends(get_remedy_repository)):
    started = time.perf_counter()
    params = parse_query(SearchParams, request)

    remedies, total = repo.search(
        params.query,
        evidence_level=params.evidence_level,
        min_similarity=params.min_similarity,
        limit=params.page_size,
        offset=params.offset,
    )
    logger.info("remedy_search", query=params.query, total=total)

    return envelope(
        dump_all(RemedyResponse, remedies),
        metadata=ResponseMetadata(
            page=params.page,
            page_size=params.page_size,
            total=total,
            processing_time=_elapsed_ms(started),
            source="database",
        ),
    )


@router.get("/remedies/categories", dependencies=[Depends(rate_limit("general"))])
def list_categories(repo: RemedyRepository = Depends(get_remedy_repository)):
    categories = cache.get_or_set_json(
        CacheKeys.remedy_categories(), repo.get_all_categories, CacheKeys.TTL_DAY
    )
    return envelope(
        {"categories": categories, "evidenceLevels": repo.get_all_evidence_levels()}
    )


def _ordered_details(repo: RemedyRepository, ids: list[str]) -> tuple[list[dict], list[str]]:
    """Detailed remedies in request order, plus the IDs with no match."""
    found = repo.get_many(ids)
    remedies = [to_detailed_remedy(found[remedy_id]) for remedy_id in ids if remedy_id in found]
    missing = [remedy_id for remedy_id in ids if remedy_id not in found]
    if not remedies:
        raise ApiError(ErrorCode.RESOURCE_NOT_FOUND, "No remedies found for the provided IDs")
    return remedies, missing


def _comparison_envelope(remedies: list[dict], missing: list[str], started: float):
    data: dict = {"remedies": remedies}
    if missing:
        data["notFoundIds"] = missing
    return envelope(
        data,
        metadata=ResponseMetadata(
            processing_time=_elapsed_ms(started), total=len(remedies), api_version=API_VERSION
        ),
    )


def _require_ids(request: Request) -> None:
    if not request.query_params.get("ids"):
        raise ApiError(ErrorCode.MISSING_PARAMETER, "ids parameter is required")


@router.get("/remedies/compare", dependencies=[Depends(rate_limit("general"))])
def compare_remedies(
    request: Request,
    db: Session = Depends(get_db),
    repo: RemedyRepository = Depends(get_remedy_repository),
    user: User = Depends(get_current_user),
):
    """
    Side-by-side detail for up to the plan's ``max_compare_items`` remedies.

    Plans without comparison get 403; asking for more than the plan allows
    is LIMIT_EXCEEDED.
    """
    started = time.perf_counter()
    limits, plan, is_trial = get_effective_plan_limits(db, user)
    if not limits.can_compare:
        raise ApiError(
            ErrorCode.FORBIDDEN,
            "Remedy comparison is not available on your current plan.",
            details={"plan": plan, "isTrial": is_trial},
        )

    _require_ids(request)
    ids = parse_query(CompareParams, request).remedy_ids
    if len(ids) > limits.max_compare_items:
        raise ApiError(
            LIMIT_EXCEEDED,
            f"Your plan allows comparing up to {limits.max_compare_items} remedies at once.",
            details={
                "plan": plan,
                "isTrial": is_trial,
                "requested": len(ids),
                "limit": limits.max_compare_items,
            },
            status_code=429,
        )

    remedies, missing = _ordered_details(repo, ids)
    logger.info("remedies_compared", user_id=user.id, found=len(remedies), missing=len(missing))
    return _comparison_envelope(remedies, missing, started)


@router.get("/remedies/batch", dependencies=[Depends(rate_limit("general"))])
def batch_remedies(request: Request, repo: RemedyRepository = Depends(get_remedy_repository)):
    """Anonymous multi-remedy lookup, capped at a fixed four IDs."""
    started = time.perf_counter()
    _require_ids(request)
    ids = parse_query(BatchParams, request).remedy_ids

    remedies, missing = _ordered_details(repo, ids)
    return _comparison_envelope(remedies, missing, started)
