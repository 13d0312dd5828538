"""
Rate limiting dependencies using the core Redis-backed limiter.
"""

from collections.abc import Callable

from fastapi import Request

from core.config import get_settings
from core.logging import get_logger
from core.security import get_rate_limiter

from ..api.response import ApiError, ErrorCode

logger = get_logger("api.rate_limit")

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


def get_client_identifier(request: Request) -> str:
    """
    Best-effort client IP.

    Proxy headers are checked first: the first X-Forwarded-For hop, then
    X-Real-IP, then CF-Connecting-IP.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


def _check_limit(endpoint_type: str, identifier: str) -> None:
    """Consume one unit of quota; raise 429 with rate limit headers when exhausted."""
    result = get_rate_limiter().check(endpoint_type, identifier)

    if not result.allowed:
        raise ApiError(
            ErrorCode.RATE_LIMIT_EXCEEDED,
            RATE_LIMIT_MESSAGE,
            headers=result.to_headers(),
        )


def rate_limit(endpoint_type: str) -> Callable[[Request], None]:
    """
    Dependency factory keyed by client IP.

    Usage:
        @router.get("", dependencies=[Depends(rate_limit("favorites"))])
    """

    def dependency(request: Request) -> None:
        if not get_settings().rate_limit_enabled:
            return
        _check_limit(endpoint_type, f"ip:{get_client_identifier(request)}")

    dependency.__name__ = f"rate_limit_{endpoint_type}"
    return dependency
