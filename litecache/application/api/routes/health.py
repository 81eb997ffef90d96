"""
Health Check Routes
===================

LIVENESS:  GET /health           is the process up? No dependency checks.
DETAILED:  GET /health/detailed  instance info, durable store and memory tier.

The detailed check reports "degraded" (still HTTP 200) when the durable store
cannot be opened: reads fall through to compute and the node keeps serving.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from litecache.application.api.dependencies import CacheManagerDep, SettingsDep

router = APIRouter(prefix="/health", tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    components: dict | None = None


@router.get("", response_model=HealthResponse)
async def health_check():
    """Quick liveness check for the load balancer."""
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/detailed")
async def detailed_health_check(cache: CacheManagerDep, settings: SettingsDep):
    """Component level health of this instance."""
    health = await cache.health_check()
    return {
        "status": health["status"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app.APP_VERSION,
        "environment": settings.app.ENVIRONMENT,
        "components": {
            "instance": health["instance"],
            "sqlite": health["sqlite"],
            "lru": health["lru"],
        },
    }
