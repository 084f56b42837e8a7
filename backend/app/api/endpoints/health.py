"""
Health check endpoints for the Product Cache API.

Liveness is static; readiness probes the product store and the distributed
cache and reports 503 when either is unavailable.
"""

from datetime import datetime, timezone
from typing import Any, Dict
import time

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import structlog

from ...constants import APP_VERSION
from ...core.config import Settings, get_settings
from ...db import get_database_health
from ...domain.products.repository_interfaces import DistributedCache
from ..dependencies import get_distributed_cache

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

# Track process start time for uptime calculation
PROCESS_START_TIME = time.time()


@router.get("")
async def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns a simple health status for load balancers and monitoring systems.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.SERVICE_NAME,
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "uptime_seconds": int(time.time() - PROCESS_START_TIME),
    }


@router.get("/ready")
async def readiness_check(
    cache: DistributedCache = Depends(get_distributed_cache),
) -> JSONResponse:
    """
    Readiness check endpoint.

    Checks the product store with a trivial query and the distributed cache
    with a ping.
    """
    ready = True
    checks: Dict[str, Any] = {}

    database = await get_database_health()
    checks["database"] = database
    if database.get("status") != "healthy":
        ready = False

    try:
        cache_ok = await cache.ping()
    except Exception as e:
        logger.error("Cache readiness check failed", error=str(e))
        cache_ok = False
    checks["cache"] = {"status": "healthy" if cache_ok else "unhealthy"}
    if not cache_ok:
        ready = False

    if not ready:
        logger.warning("Readiness check failed", checks=checks)

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks,
        },
    )
