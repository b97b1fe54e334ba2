"""Health Probes - liveness and readiness for the container orchestrator.

Invariants:
    - GET /api/health/ is 200 whenever the process can serve requests
    - GET /api/health/ready is 503 until the database answers SELECT 1
"""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import conduit.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])

SERVICE_NAME = "conduit-api"
SERVICE_VERSION = "1.0.0"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness: no dependencies are touched."""
    return {"status": "healthy", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    started = time.perf_counter()
    db_ok = manager is not None and await manager.health_check()
    latency_ms = round((time.perf_counter() - started) * 1000, 2)

    if not db_ok:
        logger.warning("Readiness check failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "latency_ms": latency_ms,
    }
