"""
Gistbook Backend - Access Log Middleware
========================================

One line per request on the `gistbook.access` logger:

    GET /api/snippets/7 -> 404 in 3.2ms [1f2e3d4c]

The level follows the status class (5xx ERROR, 4xx WARNING, else INFO), so
a deployment running at WARNING sees only failed requests. Request bodies
are never logged. Paths in QUIET_PATHS (the health probe) are not logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gistbook.middleware.request_id import request_id_var

logger = logging.getLogger("gistbook.access")

QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
        )
        return response
