"""
BileMo API — Health Check Route
=================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs `SELECT 1` on a session and reports list-cache statistics.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    healthy:   database reachable (HTTP 200)
    unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app import __version__
from app.database import get_db_session
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        await db.rollback()
        logger.warning("Health check: database unreachable: %s", str(e))

    store = request.app.state.list_cache.store
    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        cache_entries=len(store),
        cache_hits=store.hits,
        cache_misses=store.misses,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
