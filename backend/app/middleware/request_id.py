"""
DeviceLab Backend — Request ID Middleware
===========================================

What:  Tags each request with a short correlation id and echoes it back.
How:   Reuses an incoming X-Request-ID header or generates one, stores it in
       a ContextVar for loggers and error handlers, and sets the same header
       on the response.
Who:   Outermost middleware; every other layer reads the id it sets.
When:  Once per request, before routing.

Where the id shows up:
    - Response header X-Request-ID (exposed to browsers through CORS)
    - `request_id` field of every error body built in app.main
    - Access log line from RequestLoggingMiddleware
    - Service error logs written from exception handlers

    A dashboard that sends its own X-Request-ID (e.g. one per button press)
    sees that same value in all four places.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one thread each see their own id.
# Not reset after the response, so the catch-all 500 handler (which runs
# outside this middleware's call_next) can still read it.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request id to every request.

    Behavior:
        1. A non-empty X-Request-ID from the client is used as-is
        2. Otherwise 8 hex characters are generated
        3. The id goes into request_id_var and request.state.request_id
        4. The response carries it back in X-Request-ID
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # An empty header counts as absent
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        # Route handlers can read it without importing the ContextVar
        request.state.request_id = rid

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
