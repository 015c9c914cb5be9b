"""
AccessLog - Health Check Route
================================

What:  Liveness endpoint for load balancers and container health checks.
How:   Reports the package version, the configured access log preset and
       process uptime. There are no downstream dependencies to check.

Health checks are frequent; list "/health" in ACCESS_LOG_SKIP_PATHS to keep
them out of the access log.
"""

import time

from fastapi import APIRouter, Request

from accesslog import __version__
from accesslog.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        access_log_format=request.app.state.access_log_format,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
