"""Health check routes: liveness and general health."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request

from qrtickets.api.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> dict[str, Any]:
    """Application health, including a round trip to the database."""
    settings = getattr(request.app.state, "settings", None)
    env = settings.app_env if settings else "unknown"

    db_pool = getattr(request.app.state, "db_pool", None)
    if db_pool is None:
        db_status = "disconnected"
    else:
        try:
            db_status = "connected" if db_pool.ping() else "error"
        except Exception:
            logger.warning("Database health check failed", exc_info=True)
            db_status = "error"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "environment": env,
        "database": db_status,
    }


@router.get("/health/live")
def liveness_probe() -> dict[str, Any]:
    """Liveness probe: the process is up and serving requests."""
    return {"status": "alive"}
