"""
Security headers, bot blocking and request size limits.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from core.config import get_settings
from core.logging import get_logger

from ..api.response import error_response

logger = get_logger("middleware.security")

BLOCKED_USER_AGENTS = ("semrushbot", "ahrefsbot", "bytespider", "gptbot", "claudebot")


def build_content_security_policy(is_production: bool) -> str:
    script_src = "script-src 'self' 'unsafe-inline'"
    if not is_production:
        script_src += " 'unsafe-eval'"
    return "; ".join(
        [
            "default-src 'self'",
            script_src,
            "frame-ancestors 'none'",
            "base-uri 'self'",
            "form-action 'self'",
            "upgrade-insecure-requests",
        ]
    )


def security_headers(is_production: bool) -> dict[str, str]:
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Permissions-Policy": "camera=(), microphone=(), geolocation=(), browsing-topics=()",
        "X-XSS-Protection": "1; mode=block",
        "X-DNS-Prefetch-Control": "on",
        "Content-Security-Policy": build_content_security_policy(is_production),
    }
    if is_production:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to every response.

    Sits outside the guard middlewares so their short-circuit responses are
    covered too. HSTS is sent in production only.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in security_headers(get_settings().is_production).items():
            response.headers[name] = value
        return response


def is_blocked_user_agent(user_agent: str | None) -> bool:
    agent = (user_agent or "").lower()
    return any(bot in agent for bot in BLOCKED_USER_AGENTS)


class BotBlockMiddleware(BaseHTTPMiddleware):
    """Refuse known scraper and AI crawler user agents."""

    async def dispatch(self, request: Request, call_next) -> Response:
        user_agent = request.headers.get("user-agent")
        if is_blocked_user_agent(user_agent):
            logger.info("bot_blocked", user_agent=(user_agent or "")[:80], path=request.url.path)
            return JSONResponse(status_code=403, content={"error": "Access denied"})
        return await call_next(request)


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject bodies whose declared Content-Length exceeds the limit."""

    def __init__(self, app, max_size: int | None = None):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next) -> Response:
        max_size = self.max_size or get_settings().max_request_size
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            return JSONResponse(
                status_code=413,
                content=error_response(
                    "PAYLOAD_TOO_LARGE",
                    f"Maximum request size is {max_size} bytes",
                    status_code=413,
                ),
            )
        return await call_next(request)
