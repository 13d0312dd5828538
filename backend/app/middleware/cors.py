"""
CORS for the JSON API.

Only ``/api/*`` is covered. Allowed origins are echoed back with credentials;
preflights are answered here with 204 and never reach a route.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.config import get_settings

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization, X-Requested-With, X-CSRF-Token"
EXPOSED_HEADERS = "X-RateLimit-Limit, X-RateLimit-Remaining, X-RateLimit-Reset, Retry-After"
PREFLIGHT_MAX_AGE = "86400"


def apply_cors_headers(response: Response, origin: str | None, allowed: list[str]) -> None:
    if origin and origin.rstrip("/") in allowed:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Expose-Headers"] = EXPOSED_HEADERS
        response.headers["Vary"] = "Origin"


class CORSMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()
        if not request.url.path.startswith(f"{settings.api_prefix}/"):
            return await call_next(request)

        origin = request.headers.get("origin")
        allowed = settings.cors_origins_list

        if request.method == "OPTIONS":
            response = Response(status_code=204)
            response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
            response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
            response.headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
            apply_cors_headers(response, origin, allowed)
            return response

        response = await call_next(request)
        apply_cors_headers(response, origin, allowed)
        return response
