"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from stockledger.application.dto.responses import ComponentHealthResponse, HealthResponse
from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Runs a trivial query through the connection pool and reports latency.
    """
    from stockledger.infrastructure.storage.sqlite import get_pool

    try:
        pool = await get_pool()
        start = time.time()
        available = await pool.ping()
        db_status = ComponentHealthResponse(
            name="sqlite",
            available=available,
            latency_ms=(time.time() - start) * 1000,
        )
    except Exception as e:
        logger.warning("db_health_failed", error=str(e))
        db_status = ComponentHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=get_settings().app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
