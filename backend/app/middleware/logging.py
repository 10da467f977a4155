"""
Biodex Backend - Request Logging Middleware
============================================

What:  One structured access-log line per request.
How:   Measures the time spent in the rest of the stack and logs method,
       path, status and duration on the `biodex.access` logger, tagged with
       the request ID from RequestIDMiddleware.

Log level follows the status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: request bodies (form drafts, tokens) and cookies.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("biodex.access")

# Paths served without an access-log line
_QUIET_PREFIXES = ("/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each HTTP request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(_QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
