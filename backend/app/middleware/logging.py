"""
DeviceLab Backend — Request Logging Middleware
================================================

What:  One access log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client address on the "devicelab.access" logger.
Who:   Sits inside RequestIDMiddleware, so the id is already set.
When:  After the response is produced, before it leaves the app.

Example line:
    2026-01-15T12:00:00 [INFO] devicelab.access: PUT /tests/65a4.../start-stop 200 4.2ms [a1b2c3d4] from 10.0.0.5

Levels:
    5xx → ERROR    (store or server failure)
    4xx → WARNING  (bad id, missing parameter, validation, not found, duplicate IP)
    else → INFO

The same fields are attached as `extra` so a JSON formatter can pick them up.
Request bodies are never logged. Paths in SKIPPED_PATHS are not logged at all.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("devicelab.access")

# Container probes hit /health every few seconds
SKIPPED_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and timing for each request.

    Duration covers everything downstream of this middleware: CORS,
    validation, the store round trips of the service call and
    serialization. Device cascades and bulk creates make several round
    trips and show up as the slowest lines.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        # request.client is None under some ASGI test transports
        client_ip = request.client.host if request.client else "unknown"
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
