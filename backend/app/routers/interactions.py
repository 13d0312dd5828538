"""
Drug, supplement and remedy interaction lookups.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request

from core.logging import get_logger
from core.services import InteractionService, pair_count

from ..api.response import ApiError, ErrorCode, envelope
from ..dependencies import get_interaction_service, rate_limit
from ..schemas import MultipleInteractionsRequest, PairCheckParams, SubstanceParams, parse_query

logger = get_logger("interactions")

CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.get("", dependencies=[Depends(rate_limit("general"))])
def find_interactions(
    request: Request,
    service: InteractionService = Depends(get_interaction_service),
):
    """
    ``?substance=name`` lists everything known for one substance;
    ``?check=a,b`` checks a single pair.
    """
    if request.query_params.get("substance"):
        params = parse_query(SubstanceParams, request)
        interactions = service.find_by_substance(params.substance)
    elif request.query_params.get("check"):
        pair = parse_query(PairCheckParams, request)
        interactions = service.check_pair(*pair.substances)
    else:
        raise ApiError(
            ErrorCode.MISSING_PARAMETER,
            'Either "substance" or "check" query parameter is required',
        )

    return envelope(
        interactions,
        metadata={"total": len(interactions)},
        headers={"Cache-Control": CACHE_CONTROL},
    )


async def json_body(request: Request) -> Any:
    """Raw JSON body; malformed JSON is a 400 with a usage hint."""
    try:
        return json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ApiError(
            ErrorCode.INVALID_INPUT,
            'Request body must be valid JSON with a "substances" array',
        ) from None


@router.post("/check", dependencies=[Depends(rate_limit("interactionsCheck"))])
def check_interactions(
    payload: Any = Depends(json_body),
    service: InteractionService = Depends(get_interaction_service),
):
    """Check every pair in a list of substances."""
    body = MultipleInteractionsRequest.model_validate(payload)
    interactions = service.check_multiple(body.substances)

    logger.info(
        "interactions_checked",
        substances=len(body.substances),
        found=len(interactions),
    )
    return envelope(
        {
            "interactions": interactions,
            "substancesChecked": len(body.substances),
            "pairsChecked": pair_count(len(body.substances)),
            "interactionsFound": len(interactions),
        },
        metadata={"total": len(interactions)},
    )
