"""
Structured logging for Remedi.

structlog is configured once; development gets a colored console renderer,
every other environment gets one JSON object per line. Values under
sensitive keys (tokens, cookies, emails) are masked before rendering.

Usage:
    from core.logging import get_logger
    logger = get_logger("favorites")
    logger.info("favorite_added", remedy_id=remedy_id)
"""

import logging
import sys
import time
from collections.abc import Callable, MutableMapping
from functools import lru_cache, wraps
from typing import Any, TypeVar

import structlog
from structlog.types import EventDict, Processor

F = TypeVar("F", bound=Callable[..., Any])

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset(
    {"authorization", "cookie", "csrf_token", "email", "password", "token", "access_token"}
)

# Polled by load balancers; only logged when something goes wrong
QUIET_PATHS = frozenset({"/api/health"})


def _is_development() -> bool:
    from .config import get_settings

    settings = get_settings()
    return settings.debug or settings.env == "development"


def _add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = "remedi"
    return event_dict


def _mask_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def get_processors() -> list[Processor]:
    """structlog processor chain for the current environment."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_app_context,
        _mask_sensitive,
    ]

    if _is_development():
        return shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]
    return shared_processors + [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging. Call once at application startup."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=get_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


# =============================================================================
# Request Context
# =============================================================================


def bind_context(**kwargs: Any) -> None:
    """Bind values (request_id, user_id) onto every later entry in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_context_value(key: str, default: Any = None) -> Any:
    return structlog.contextvars.get_contextvars().get(key, default)


# =============================================================================
# Decorators
# =============================================================================


def log_timing(
    operation: str, logger: structlog.stdlib.BoundLogger | None = None
) -> Callable[[F], F]:
    """
    Log how long a service call took, and failures with their duration.

    Usage:
        @log_timing("journal_insights")
        def get_remedy_insights(session, user_id, remedy_id):
            ...
    """

    def decorator(func: F) -> F:
        _logger = logger or get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _logger.error(
                    "operation_failed",
                    operation=operation,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    error=str(e),
                )
                raise
            _logger.debug(
                "operation_complete",
                operation=operation,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# FastAPI Integration
# =============================================================================


def _client_ip(scope: MutableMapping[str, Any]) -> str | None:
    for name, value in scope.get("headers", []):
        if name == b"x-forwarded-for":
            return value.decode("latin-1").split(",")[0].strip()
    client = scope.get("client")
    return client[0] if client else None


class RequestLoggingMiddleware:
    """
    ASGI middleware logging one line per request with status and duration.

    Runs inside RequestIDMiddleware so every line carries the request id.
    Health checks are only logged when they fail.
    """

    def __init__(self, app):
        self.app = app
        self._logger: structlog.stdlib.BoundLogger | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        if self._logger is None:
            self._logger = get_logger("http")
        return self._logger

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        path = scope.get("path", "")
        method = scope.get("method", "")
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log_method = self.logger.error
            elif status_code >= 400:
                log_method = self.logger.warning
            elif path in QUIET_PATHS:
                log_method = self.logger.debug
            else:
                log_method = self.logger.info

            log_method(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                client_ip=_client_ip(scope),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "get_context_value",
    "log_timing",
    "RequestLoggingMiddleware",
]
