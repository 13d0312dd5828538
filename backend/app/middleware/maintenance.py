"""
Maintenance mode gate.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from core.config import get_settings

from ..api.response import MAINTENANCE_MODE

MAINTENANCE_PAGE = "/maintenance"
MAINTENANCE_MESSAGE = "The service is currently under maintenance. Please try again later."


def maintenance_exempt_paths(api_prefix: str) -> tuple[str, ...]:
    return (
        f"{api_prefix}/health",
        MAINTENANCE_PAGE,
        "/favicon.ico",
        "/robots.txt",
        "/sitemap.xml",
    )


class MaintenanceModeMiddleware(BaseHTTPMiddleware):
    """
    While MAINTENANCE_MODE is on, API calls get 503 and pages are redirected.

    The setting is read per request so it can be flipped without a rebuild.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()
        if not settings.maintenance_mode:
            return await call_next(request)

        path = request.url.path
        if any(path.startswith(exempt) for exempt in maintenance_exempt_paths(settings.api_prefix)):
            return await call_next(request)

        if path.startswith(f"{settings.api_prefix}/"):
            return JSONResponse(
                status_code=503,
                content={
                    "success": False,
                    "error": {"code": MAINTENANCE_MODE, "message": MAINTENANCE_MESSAGE},
                },
            )

        return RedirectResponse(url=MAINTENANCE_PAGE, status_code=307)
