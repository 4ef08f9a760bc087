"""
Product Catalog Backend — Health Check Route
==============================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the upload directory.
Who:   Called by container health checks, load balancers, and monitoring.

Status levels:
    - healthy:   Database reachable and upload directory present (HTTP 200)
    - unhealthy: Either dependency down (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from sqlalchemy import text

from app import __version__
from app.schemas.product import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    storage_status = "available"
    overall = "healthy"

    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not request.app.state.image_store.directory.is_dir():
        storage_status = "unavailable"
        overall = "unhealthy"
        logger.warning("Health check: upload directory missing")

    if overall != "healthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
