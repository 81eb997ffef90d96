#!/usr/bin/env python3
"""
Metrics Collector with Prometheus Integration

Counters and histograms for the read-through path and the forwarding hop:
- hits per tier, misses, stale serves
- computes (foreground / background) and their duration
- forwarded writes by outcome
- unhandled errors by type

Architectural Decision: prometheus-client for industry-standard metrics
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

from litecache.core.config.settings import get_settings
from litecache.core.logging.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# Metric Definitions
# ============================================================================

CACHE_HITS = Counter(
    'litecache_hits_total',
    'Cache hits by tier',
    ['tier']
)

CACHE_MISSES = Counter(
    'litecache_misses_total',
    'Lookups that found nothing in either tier'
)

STALE_SERVED = Counter(
    'litecache_stale_served_total',
    'Stale values served while revalidating in the background'
)

COMPUTES = Counter(
    'litecache_computes_total',
    'Compute function invocations',
    ['mode', 'outcome']
)

COMPUTE_DURATION = Histogram(
    'litecache_compute_duration_seconds',
    'Compute function duration in seconds',
    ['mode'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

FORWARDS = Counter(
    'litecache_forwards_total',
    'Writes forwarded from a replica to the primary',
    ['operation', 'outcome']
)

ERRORS = Counter(
    'litecache_errors_total',
    'Unhandled errors by type',
    ['error_type', 'stage']
)

APP_INFO = Info(
    'litecache_app',
    'Application information'
)


class MetricsCollector:
    """Thin facade over the module level Prometheus metrics."""

    def __init__(self):
        settings = get_settings()
        APP_INFO.info({
            'version': settings.app.APP_VERSION,
            'environment': settings.app.ENVIRONMENT,
            'app_name': settings.app.APP_NAME,
        })

    # =========================================================================
    # Cache Metrics
    # =========================================================================

    def record_cache_hit(self, tier: str) -> None:
        CACHE_HITS.labels(tier=tier).inc()

    def record_cache_miss(self) -> None:
        CACHE_MISSES.inc()

    def record_stale_served(self) -> None:
        STALE_SERVED.inc()

    def record_compute(self, mode: str, outcome: str, duration_seconds: float) -> None:
        """mode is 'foreground' or 'background'; outcome 'success' or 'error'."""
        COMPUTES.labels(mode=mode, outcome=outcome).inc()
        COMPUTE_DURATION.labels(mode=mode).observe(duration_seconds)

    # =========================================================================
    # Forwarding Metrics
    # =========================================================================

    def record_forward(self, operation: str, outcome: str) -> None:
        FORWARDS.labels(operation=operation, outcome=outcome).inc()

    # =========================================================================
    # Error Metrics
    # =========================================================================

    def record_error(self, error_type: str, stage: str) -> None:
        ERRORS.labels(error_type=error_type, stage=stage).inc()

    # =========================================================================
    # Export
    # =========================================================================

    def get_prometheus_metrics(self) -> bytes:
        return generate_latest()

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance (singleton)."""
    global _metrics_collector

    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()

    return _metrics_collector
