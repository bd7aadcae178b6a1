"""
SnippetBox Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request.
How:   Times the request around `call_next`, then logs method, path,
       status, duration, request ID, caller and (when authenticated) user id.
Who:   Applied to every request; logs to the "snippetbox.access" logger.

Log Line:
    GET /api/snippets 200 12.4ms [a1b2c3d4] user=7 from 127.0.0.1

    The same values are attached as `extra` fields for structured handlers.

What we log vs what we DON'T log:
    ✅ method, path, status, duration, client IP, request ID, user id
    ❌ request bodies (passwords, snippet code), Authorization headers, tokens
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")

# Polled by container orchestrators every few seconds
QUIET_PATHS = frozenset({"/health", "/api/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request except health checks.

    Log level follows the status code: 5xx → ERROR, 4xx → WARNING,
    everything else → INFO.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        # Set by get_current_user on authenticated routes
        user_id = getattr(request.state, "user_id", None)
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            user_id if user_id is not None else "-",
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": user_id,
            },
        )

        return response
