"""
Unit Tests for Monitoring Infrastructure

Tests the Prometheus metrics collector.
"""

import pytest
from prometheus_client import REGISTRY

from litecache.infrastructure.monitoring.metrics_collector import (
    MetricsCollector,
    get_metrics_collector,
)


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


@pytest.mark.unit
class TestMetricsCollector:
    """Test suite for MetricsCollector."""

    @pytest.fixture
    def metrics(self):
        return MetricsCollector()

    def test_singleton(self):
        assert get_metrics_collector() is get_metrics_collector()

    def test_records_hits_per_tier(self, metrics):
        before = _sample("litecache_hits_total", {"tier": "lru"})

        metrics.record_cache_hit("lru")

        assert _sample("litecache_hits_total", {"tier": "lru"}) == before + 1

    def test_records_misses_and_stale(self, metrics):
        misses = _sample("litecache_misses_total")
        stale = _sample("litecache_stale_served_total")

        metrics.record_cache_miss()
        metrics.record_stale_served()

        assert _sample("litecache_misses_total") == misses + 1
        assert _sample("litecache_stale_served_total") == stale + 1

    def test_records_compute(self, metrics):
        labels = {"mode": "background", "outcome": "error"}
        before = _sample("litecache_computes_total", labels)

        metrics.record_compute("background", "error", 0.02)

        assert _sample("litecache_computes_total", labels) == before + 1

    def test_records_forwards(self, metrics):
        labels = {"operation": "set", "outcome": "rejected"}
        before = _sample("litecache_forwards_total", labels)

        metrics.record_forward("set", "rejected")

        assert _sample("litecache_forwards_total", labels) == before + 1

    def test_prometheus_export(self, metrics):
        metrics.record_cache_miss()

        body = metrics.get_prometheus_metrics()

        assert b"litecache_misses_total" in body
        assert metrics.get_content_type().startswith("text/plain")
