"""
Middleware that injects a request ID into every incoming request.
"""

import uuid

from fastapi import Request

from core.logging import bind_context, clear_context

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware:
    """Echo X-Request-ID (or mint a uuid4) and bind it to the log context."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive)
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        clear_context()
        bind_context(request_id=request_id)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                headers = message.setdefault("headers", [])
                headers.append((b"x-request-id", request_id.encode()))
            await send(message)

        await self.app(scope, receive, send_wrapper)
