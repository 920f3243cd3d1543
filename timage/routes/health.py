"""
T-Image API: Health Check Route
==================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs SELECT 1 against the database. The service is only "healthy"
       when it can reach its store; otherwise it answers 503 so traffic is
       routed away.
"""

import logging
import time

from fastapi import APIRouter, Response

from timage import __version__
from timage.database import check_connection
from timage.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    connected = await check_connection()
    if not connected:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
