"""
Security module for Remedi.

Provides:
- Rate limiting
- CSRF token helpers
"""

from typing import TYPE_CHECKING, Any

from .csrf import (
    CSRF_COOKIE_MAX_AGE,
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    CSRF_PROTECTED_METHODS,
    generate_csrf_token,
    tokens_match,
)

if TYPE_CHECKING:
    from .rate_limiter import RateLimiter, RateLimitResult, get_rate_limiter


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loading to avoid import-time cycles.

    The rate limiter pulls in the Redis cache, which reads settings; importing
    it eagerly here would create circular imports during configuration.
    """
    if name in {"RateLimiter", "RateLimitResult", "get_rate_limiter"}:
        from . import rate_limiter

        return getattr(rate_limiter, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(__all__)


__all__ = [
    "RateLimiter",
    "RateLimitResult",
    "get_rate_limiter",
    "CSRF_COOKIE_NAME",
    "CSRF_HEADER_NAME",
    "CSRF_COOKIE_MAX_AGE",
    "CSRF_PROTECTED_METHODS",
    "generate_csrf_token",
    "tokens_match",
]
