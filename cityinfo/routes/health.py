"""
CityInfo API: Health Check Route
================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Reports the configured store and, for the database store, runs
       SELECT 1 through the application's session factory.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: database store configured but unreachable (HTTP 200, flagged)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy import text

from cityinfo import __version__
from cityinfo.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the service and its entity store.",
)
async def health_check(request: Request) -> HealthResponse:
    state = request.app.state
    db_status = "not_used"
    overall = "healthy"

    if state.store_backend == "database":
        db_status = "connected"
        try:
            async with state.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        store=state.store_backend,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
