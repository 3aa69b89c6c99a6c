"""
Gistbook Backend - Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs SELECT 1 against the store and reports uptime.

Status levels:
    - healthy:   the database answers (HTTP 200)
    - unhealthy: the database does not answer (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from gistbook import __version__
from gistbook.database import RecordStore, get_store
from gistbook.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: RecordStore = Depends(get_store),
) -> HealthResponse:
    if await store.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
