"""
Unit Tests for API Routes

Tests health, metrics and application-level behavior with TestClient.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from litecache.application.app import create_app

from tests.test_fixtures.topology import ADMIN_TOKEN, PRIMARY_ID, REPLICA_ID


@pytest.fixture
def client(primary_settings, transport):
    with TestClient(create_app(primary_settings, forward_transport=transport)) as client:
        yield client


@pytest.mark.unit
class TestHealthRoutes:
    """Test suite for health check routes."""

    def test_health_endpoint_returns_200(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_health_timestamp_is_utc_aware(self, client):
        timestamp = datetime.fromisoformat(client.get("/health").json()["timestamp"])

        assert timestamp.utcoffset() == timezone.utc.utcoffset(None)

    def test_detailed_health_on_primary(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["instance"]["currentInstance"] == PRIMARY_ID
        assert data["components"]["sqlite"]["status"] == "healthy"
        assert data["components"]["lru"]["size"] == 0

    def test_detailed_health_on_fresh_replica_is_degraded(self, replica_settings, transport):
        with TestClient(create_app(replica_settings, forward_transport=transport)) as replica:
            response = replica.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["instance"]["currentInstance"] == REPLICA_ID
        assert data["components"]["instance"]["currentIsPrimary"] is False


@pytest.mark.unit
class TestAdminRoutes:

    def test_prometheus_metrics(self, client):
        client.get("/cache", params={"token": ADMIN_TOKEN})

        response = client.get("/admin/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "litecache_" in response.text

    def test_stats_requires_token(self, client):
        assert client.get("/admin/stats").status_code == 401

    def test_stats(self, client):
        response = client.get("/admin/stats", params={"token": ADMIN_TOKEN})

        assert response.status_code == 200
        assert response.json()["lru"]["size"] == 0
        assert response.json()["always_fresh"] is False


@pytest.mark.unit
class TestApplication:

    def test_root(self, client):
        data = client.get("/").json()

        assert data["name"] == "litecache"
        assert data["health"] == "/health"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert response.headers["X-Request-ID"]

    def test_error_response_carries_request_id(self, client):
        response = client.get("/cache", headers={"X-Request-ID": "req-7"})

        assert response.status_code == 401
        assert response.json()["request_id"] == "req-7"

    def test_development_builds_always_fresh_cache(self, primary_litefs_dir, db_path, transport):
        from tests.test_fixtures.app_settings import make_settings

        settings = make_settings(primary_litefs_dir, db_path, PRIMARY_ID, ENVIRONMENT="development")

        with TestClient(create_app(settings, forward_transport=transport)) as dev:
            stats = dev.get("/admin/stats", params={"token": ADMIN_TOKEN}).json()

        assert stats["always_fresh"] is True
