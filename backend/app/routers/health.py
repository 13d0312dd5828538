"""
Health check endpoint.

Anonymous callers only learn whether the service is up. Admins can ask for
``verbose=true`` to see per-service status.
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from core.cache import cache
from core.config import get_settings
from core.db import db, utcnow
from core.logging import get_logger
from core.models import User

from ..auth.dependencies import get_optional_user, is_admin

logger = get_logger("health")

STARTED_AT = time.monotonic()

router = APIRouter(prefix="/health", tags=["health"])


def database_status() -> dict:
    result = db.health_check()
    if result["healthy"]:
        return {
            "status": "healthy",
            "latency": result["latency_ms"],
            "message": "Database connection successful",
        }
    return {"status": "unhealthy", "latency": result["latency_ms"], "message": result["error"]}


def overall_status(services: dict[str, dict]) -> str:
    """A sick database takes the service down; anything else only degrades it."""
    if services["database"]["status"] != "healthy":
        return "unhealthy"
    if any(service["status"] == "unhealthy" for service in services.values()):
        return "degraded"
    return "healthy"


@router.get("")
def health_check(verbose: bool = False, user: User | None = Depends(get_optional_user)):
    timestamp = utcnow().isoformat()
    database = database_status()

    if verbose and is_admin(user):
        settings = get_settings()
        services = {"database": database, "redis": cache.health_check()}
        status = overall_status(services)
        body = {
            "status": status,
            "timestamp": timestamp,
            "version": settings.app_version,
            "environment": settings.env,
            "uptime": round(time.monotonic() - STARTED_AT, 1),
            "services": services,
        }
    else:
        status = "healthy" if database["status"] == "healthy" else "unhealthy"
        body = {"status": status, "timestamp": timestamp}

    if status == "unhealthy":
        logger.warning("health_check_failed", database=database.get("message"))
    return JSONResponse(status_code=503 if status == "unhealthy" else 200, content=body)
