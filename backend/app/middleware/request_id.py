"""
Biodex Backend - Request ID Middleware
=======================================

What:  Assigns an ID to each incoming request and returns it in the response.
Why:   Every log line written while handling a request can be correlated,
       and an error page can show the ID for support requests.
How:   Reuses the client's X-Request-ID when present, otherwise generates a
       short UUID; stores it in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
