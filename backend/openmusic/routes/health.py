"""
OpenMusic API — Health Check Route
===================================

What:  Liveness and database probe for load balancers and Docker health checks.
How:   Runs `SELECT 1` on a request session. The service is "healthy" when the
       database answers and "unhealthy" otherwise; the endpoint itself always
       responds so the probe can read the reason.
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic import __version__
from openmusic.core.routing import Route, register_routes
from openmusic.database import get_db_session
from openmusic.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

# Set once at import; used for uptime reporting
_start_time = time.time()


async def health_check(db: AsyncSession = Depends(get_db_session)) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )


routes = [
    Route("GET", "/health", health_check, summary="Service health check"),
]

router = register_routes(APIRouter(tags=["Health"]), routes)
