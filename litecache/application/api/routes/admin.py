"""
Admin Routes
============

Operational endpoints:
    GET /admin/metrics   Prometheus text exposition (open, for scrapers)
    GET /admin/stats     cache manager counters (operator token required)
"""

from fastapi import APIRouter, Depends, Response

from litecache.application.api.dependencies import CacheManagerDep, require_admin_token
from litecache.infrastructure.monitoring.metrics_collector import get_metrics_collector

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/metrics")
async def get_prometheus_metrics():
    """
    Expose metrics in Prometheus text format for scraping.

    Returned as a raw Response so the body is not JSON encoded.
    """
    metrics = get_metrics_collector()
    return Response(content=metrics.get_prometheus_metrics(), media_type=metrics.get_content_type())


@router.get("/stats", dependencies=[Depends(require_admin_token)])
async def get_cache_stats(cache: CacheManagerDep):
    return cache.stats()
