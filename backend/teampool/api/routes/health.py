"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ answers 200 whenever the process is up, without touching the database
    - GET /health/ready answers 503 until the database answers SELECT 1

Design Decisions:
    - db_manager read through the module at call time: it is assigned during lifespan startup,
      after this module is imported
"""

import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from teampool.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    return {
        "status": "healthy",
        "service": "teampool-api",
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check():
    manager = database.db_manager
    started = time.perf_counter()
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "database_latency_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    }
