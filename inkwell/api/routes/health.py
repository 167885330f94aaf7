"""Health & Readiness Probes — service index, health report, readiness.

Invariants:
    - GET /health always answers; db is "connected" or "disconnected"
    - GET /health/ready returns 503 if the database is unreachable
    - uptime is seconds since this process imported the module

Design Decisions:
    - Separate health report and readiness: the report is for humans, readiness
      for load balancers
"""

import logging
import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from inkwell.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

_PROCESS_STARTED = time.monotonic()


async def _database_ok(request: Request) -> bool:
    manager = getattr(request.app.state, "db_manager", None)
    return await manager.health_check() if manager else False


@router.get("/", status_code=status.HTTP_200_OK)
async def index():
    """Service index with links to the resource collections."""
    settings = get_settings()
    prefix = settings.api_prefix
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "links": {
            "api": prefix,
            "health": "/health",
            "users": f"{prefix}/users",
            "posts": f"{prefix}/posts",
        },
    }


@router.get("/health")
async def health_check(request: Request):
    """Storage connectivity, process uptime, and environment."""
    return {
        "db": "connected" if await _database_ok(request) else "disconnected",
        "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
        "environment": get_settings().environment,
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe — includes database connectivity."""
    if not await _database_ok(request):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
