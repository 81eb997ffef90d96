"""
Cache Backend Protocols

Abstract protocols for the collaborators of the cache facade, enabling
dependency injection and testability.

The SQLite store and the LiteFS directory satisfy these structurally; the
store only depends on InstanceResolver, not on the LiteFS implementation.
"""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from litecache.core.models import CacheEntry, InstanceInfo


@runtime_checkable
class DurableStore(Protocol):
    """
    Durable key/value store shared (through replication) by every node.

    Reads work everywhere; writes are only legal on the primary.
    """

    db_path: Path | None

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry for `key`, or None when absent or unparseable."""
        ...

    async def set(self, key: str, entry: CacheEntry) -> None:
        """Upsert `entry` under `key`."""
        ...

    async def delete(self, key: str) -> None:
        """Remove `key` if present."""
        ...

    async def list_keys(self, limit: int) -> list[str]:
        ...

    async def search_keys(self, query: str, limit: int) -> list[str]:
        ...

    async def health_check(self) -> dict[str, Any]:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class InstanceResolver(Protocol):
    """Answers "am I the primary?" for the write path."""

    def get_current_instance_sync(self) -> str:
        ...

    def get_instance_info_sync(self) -> InstanceInfo:
        ...

    async def get_instance_info(self) -> InstanceInfo:
        ...

    async def get_all_instances(self) -> dict[str, str]:
        ...

    async def ensure_instance(self, instance: str) -> None:
        ...
