"""Health Probes: process liveness and database readiness.

Invariants:
    - /api/health/ answers 200 whenever the process can serve a request
    - /api/health/ready answers 503 until db_manager exists and SELECT 1 succeeds
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from studyhub.infrastructure import database

SERVICE_NAME = "studyhub-api"

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness():
    # looked up per request: the manager is created in the lifespan, after import
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": {"database": "unavailable"}},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
