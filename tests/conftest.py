"""
Pytest Configuration and Shared Test Fixtures

This module provides reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.

Topology: see tests/test_fixtures/topology.py
"""

from pathlib import Path

import httpx
import pytest

from litecache.core.config.settings import Settings
from litecache.infrastructure.cache.cache_manager import CacheManager
from litecache.infrastructure.cache.forwarding import PrimaryForwarder
from litecache.infrastructure.cache.memory_tier import MemoryTier
from litecache.infrastructure.cache.sqlite_store import SQLiteCacheStore
from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory

from tests.test_fixtures.app_settings import make_settings
from tests.test_fixtures.topology import (
    APP_NAME,
    INTERNAL_TOKEN,
    KNOWN_INSTANCES,
    PRIMARY_ID,
    REPLICA_ID,
)
from tests.test_fixtures.transport import RecordingTransport


# ============================================================================
# LiteFS Topology Fixtures
# ============================================================================


@pytest.fixture
def primary_litefs_dir(tmp_path) -> Path:
    """LiteFS mount of the primary: no .primary marker."""
    path = tmp_path / "litefs-primary"
    path.mkdir()
    return path


@pytest.fixture
def replica_litefs_dir(tmp_path) -> Path:
    """LiteFS mount of a replica: .primary names the primary."""
    path = tmp_path / "litefs-replica"
    path.mkdir()
    (path / ".primary").write_text(PRIMARY_ID + "\n")
    return path


def _directory(litefs_dir: Path, instance_id: str) -> LiteFSInstanceDirectory:
    return LiteFSInstanceDirectory(
        litefs_dir,
        instance_id=instance_id,
        region=KNOWN_INSTANCES[instance_id],
        instances=KNOWN_INSTANCES,
        cache_seconds=0,
        app_name=APP_NAME,
        internal_port=8080,
    )


@pytest.fixture
def primary_directory(primary_litefs_dir) -> LiteFSInstanceDirectory:
    return _directory(primary_litefs_dir, PRIMARY_ID)


@pytest.fixture
def replica_directory(replica_litefs_dir) -> LiteFSInstanceDirectory:
    return _directory(replica_litefs_dir, REPLICA_ID)


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "data" / "cache.db"


@pytest.fixture
def primary_store(db_path, primary_directory):
    store = SQLiteCacheStore(db_path, primary_directory)
    yield store
    store.close()


@pytest.fixture
def replica_store(tmp_path, replica_directory):
    store = SQLiteCacheStore(tmp_path / "replica" / "cache.db", replica_directory)
    yield store
    store.close()


# ============================================================================
# Forwarding Fixtures
# ============================================================================


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_cache_manager():
    """
    Factory for CacheManager instances wired to a directory and transport.

    Usage:
        cache = make_cache_manager(primary_directory, db_path)
    """
    created: list[CacheManager] = []

    def _make(
        directory: LiteFSInstanceDirectory,
        path: Path,
        transport: httpx.AsyncBaseTransport | None = None,
        always_fresh: bool = False,
        max_size: int = 100,
    ) -> CacheManager:
        forwarder = PrimaryForwarder(
            directory,
            token=INTERNAL_TOKEN,
            transport=transport or RecordingTransport(),
        )
        cache = CacheManager(
            memory=MemoryTier(max_size),
            store=SQLiteCacheStore(path, directory),
            instances=directory,
            forwarder=forwarder,
            always_fresh=always_fresh,
        )
        created.append(cache)
        return cache

    yield _make

    for cache in created:
        cache.store.close()


@pytest.fixture
def primary_cache(make_cache_manager, primary_directory, db_path) -> CacheManager:
    return make_cache_manager(primary_directory, db_path)


@pytest.fixture
def replica_cache(make_cache_manager, replica_directory, tmp_path, transport) -> CacheManager:
    return make_cache_manager(replica_directory, tmp_path / "replica" / "cache.db", transport)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def primary_settings(primary_litefs_dir, db_path) -> Settings:
    return make_settings(primary_litefs_dir, db_path, PRIMARY_ID)


@pytest.fixture
def replica_settings(replica_litefs_dir, tmp_path) -> Settings:
    return make_settings(replica_litefs_dir, tmp_path / "replica" / "cache.db", REPLICA_ID)
