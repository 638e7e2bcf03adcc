"""Health & Readiness Probes — liveness and readiness of the registry service.

Invariants:
    - GET /health/ answers 200 while the process is up, without touching the database
    - GET /health/ready answers 503 until services are wired and the database responds
    - Readiness names the notification channel in use; a notifier is never
      called from a probe
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from car_registry.api.dependencies import get_db_manager, get_notifier
from car_registry.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness probe."""
    return {
        "status": "healthy",
        "service": "car-registry",
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness_check(
    db_manager: DatabaseSessionManager | None = Depends(get_db_manager),
    notifier=Depends(get_notifier),
):
    """Readiness probe: database reachable, notification channel configured."""
    if db_manager is None or notifier is None:
        return _not_ready("services_not_wired")
    if not await db_manager.health_check():
        return _not_ready("database_unavailable")
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "notifier": getattr(notifier, "channel", type(notifier).__name__),
        },
    }


def _not_ready(reason: str) -> JSONResponse:
    logger.warning(f"Readiness check failed: {reason}", extra={"path": "/api/v1/health/ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
