"""
Bookshelf Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 through a request-scoped session and reports the result.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

    Status levels:
    - healthy:   Database reachable
    - unhealthy: Database unreachable (HTTP 200 with the flag set; the body,
                 not the status code, is the signal)

    With USE_IN_MEMORY_STORE=true the database is not consulted and is
    reported as "in_memory".
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.database import get_db_session
from bookshelf.schemas.book import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(db: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    """Probe database connectivity and return aggregate status with uptime."""
    db_status = "connected"
    overall = "healthy"

    if settings.use_in_memory_store:
        db_status = "in_memory"
    else:
        try:
            await db.execute(text("SELECT 1"))
        except Exception as e:
            await db.rollback()
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
