"""
DeviceLab Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs SELECT 1 against the store and reports the result with uptime.
When:  Periodically (e.g., every 30 seconds by Docker).

Status levels:
    - OK:        Store reachable (HTTP 200)
    - DEGRADED:  Store unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its store.",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "OK"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "DEGRADED"
        logger.warning("Health check: store unreachable: %s", str(e))

    if overall != "OK":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
