"""
Unit Tests for the Primary Forwarder

Tests the forwarded request shape and best-effort failure handling.
"""

import orjson
import pytest

from litecache.core.models import CacheEntry
from litecache.infrastructure.cache.forwarding import PrimaryForwarder

from tests.test_fixtures.topology import INTERNAL_TOKEN, PRIMARY_BASE_URL
from tests.test_fixtures.transport import RecordingTransport


@pytest.mark.unit
class TestPrimaryForwarder:
    """Test suite for PrimaryForwarder."""

    @pytest.mark.asyncio
    async def test_forwards_write_to_primary(self, replica_directory):
        transport = RecordingTransport()
        forwarder = PrimaryForwarder(replica_directory, token=INTERNAL_TOKEN, transport=transport)
        entry = CacheEntry.create({"n": 1}, ttl=60, now=100.0)

        try:
            result = await forwarder.forward("k", entry)
        finally:
            await forwarder.aclose()

        assert result is True
        assert len(transport.requests) == 1

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{PRIMARY_BASE_URL}/cache/sqlite"
        assert request.headers["auth"] == INTERNAL_TOKEN
        assert orjson.loads(request.content) == {"key": "k", "cacheValue": entry.to_wire()}

    @pytest.mark.asyncio
    async def test_forwards_delete_as_null(self, replica_directory):
        transport = RecordingTransport()
        forwarder = PrimaryForwarder(replica_directory, token=INTERNAL_TOKEN, transport=transport)

        try:
            await forwarder.forward("k", None)
        finally:
            await forwarder.aclose()

        assert orjson.loads(transport.requests[0].content) == {"key": "k", "cacheValue": None}

    @pytest.mark.asyncio
    async def test_rejected_write_is_dropped(self, replica_directory):
        transport = RecordingTransport(status=500)
        forwarder = PrimaryForwarder(replica_directory, token=INTERNAL_TOKEN, transport=transport)

        try:
            result = await forwarder.forward("k", CacheEntry.create("v"))
        finally:
            await forwarder.aclose()

        assert result is False
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_network_error_is_dropped_without_retry(self, replica_directory):
        transport = RecordingTransport(fail=True)
        forwarder = PrimaryForwarder(replica_directory, token=INTERNAL_TOKEN, transport=transport)

        try:
            result = await forwarder.forward("k", CacheEntry.create("v"))
        finally:
            await forwarder.aclose()

        assert result is False
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_app_name_is_dropped(self, tmp_path):
        from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory

        (tmp_path / ".primary").write_text("elsewhere")
        directory = LiteFSInstanceDirectory(tmp_path, instance_id="here", cache_seconds=0)
        transport = RecordingTransport()
        forwarder = PrimaryForwarder(directory, token=INTERNAL_TOKEN, transport=transport)

        try:
            result = await forwarder.forward("k", CacheEntry.create("v"))
        finally:
            await forwarder.aclose()

        assert result is False
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_drain_waits_for_pending(self, replica_directory):
        transport = RecordingTransport()
        forwarder = PrimaryForwarder(replica_directory, token=INTERNAL_TOKEN, transport=transport)

        for i in range(3):
            forwarder.forward(f"k{i}", CacheEntry.create(i))
        assert forwarder.pending_count == 3

        await forwarder.drain()

        assert forwarder.pending_count == 0
        assert len(transport.requests) == 3
        await forwarder.aclose()
