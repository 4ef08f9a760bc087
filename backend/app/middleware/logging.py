"""
Product Catalog Backend — Request Logging Middleware
======================================================

What:  One log line per HTTP request: method, path, status, duration.
Who:   Applied to every request; runs inside RequestIDMiddleware so the
       request ID is already set.

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies (form fields, uploaded files) are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("catalog.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log: one line per request, level chosen by status class."""

    # Health probes would drown out the API traffic
    QUIET_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client = request.client.host if request.client else "-"
        # Declared size only; multipart bodies are never read here
        body_bytes = request.headers.get("content-length", "-")

        logger.log(
            _level_for(response.status_code),
            "[%s] %s %s → %d in %.1fms (body=%s bytes, client=%s)",
            rid,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            body_bytes,
            client,
        )
        return response
