"""
PodReview Backend — Access Log Middleware
==========================================

What:  One log line per request: method, path, status, duration, request id
       and the authenticated caller (when a bearer token was sent).
How:   Severity follows the status class: 5xx → ERROR, 4xx → WARNING,
       everything else → INFO. Health checks are not logged.

Request bodies and the Authorization header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from podreview.middleware.request_id import request_id_var

logger = logging.getLogger("podreview.access")

QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured access log keyed by request id."""

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
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        status = response.status_code
        authenticated = request.headers.get("Authorization", "").lower().startswith("bearer ")

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            " (bearer)" if authenticated else "",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
