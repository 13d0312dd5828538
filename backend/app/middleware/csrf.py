"""
Double-submit cookie CSRF check for state-changing API calls.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from core.config import get_settings
from core.logging import get_logger
from core.security import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    CSRF_PROTECTED_METHODS,
    tokens_match,
)

from ..api.response import CSRF_VALIDATION_FAILED, error_response

logger = get_logger("middleware.csrf")


def requires_csrf_check(request: Request, api_prefix: str) -> bool:
    """
    Only state-changing /api calls made with cookies are checked.

    Auth and webhook endpoints are exempt, as are Bearer-token clients,
    which browsers never send automatically.
    """
    path = request.url.path
    if request.method not in CSRF_PROTECTED_METHODS:
        return False
    if not path.startswith(f"{api_prefix}/"):
        return False
    if path.startswith(f"{api_prefix}/v1/auth/") or "/webhooks" in path:
        return False
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return False
    return True


class CSRFMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if requires_csrf_check(request, get_settings().api_prefix):
            cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
            header_token = request.headers.get(CSRF_HEADER_NAME)
            if not tokens_match(cookie_token, header_token):
                logger.warning(
                    "csrf_validation_failed",
                    path=request.url.path,
                    has_cookie=bool(cookie_token),
                    has_header=bool(header_token),
                )
                return JSONResponse(
                    status_code=403,
                    content=error_response(
                        CSRF_VALIDATION_FAILED,
                        "Invalid or missing CSRF token",
                        status_code=403,
                    ),
                )
        return await call_next(request)
