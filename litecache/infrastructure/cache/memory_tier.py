#!/usr/bin/env python3
"""
In-Memory LRU Tier

Per-process, bounded cache of CacheEntry objects. It is advisory: the SQLite
tier is authoritative and this tier only saves a database read.

Implementation Details:
- OrderedDict for O(1) access and LRU ordering
- Plain synchronous methods; all callers run on one event loop thread and
  every operation touches a single key, so no lock is taken
- Evicts least recently used entries once max_size is exceeded
"""

from collections import OrderedDict

from litecache.core.config.constants import LRU_CACHE_MAX_SIZE
from litecache.core.models import CacheEntry


class MemoryTier:
    """In-memory LRU storage for cache entries."""

    name = "LRU cache"

    def __init__(self, max_size: int = LRU_CACHE_MAX_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._max_size = max_size
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry and mark it most recently used."""
        entry = self._cache.get(key)
        if entry is not None:
            self._cache.move_to_end(key)
        return entry

    def peek(self, key: str) -> CacheEntry | None:
        """Return the entry without touching LRU order (admin views)."""
        return self._cache.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        """Store the entry, evicting the oldest ones if over capacity."""
        if key in self._cache:
            self._cache.move_to_end(key)

        self._cache[key] = entry

        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def delete(self, key: str) -> bool:
        """Returns True if deleted, False if not found."""
        return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        self._cache.clear()

    def keys(self) -> list[str]:
        """All keys, least recently used first."""
        return list(self._cache.keys())

    def list_keys(self, limit: int) -> list[str]:
        return self.keys()[:max(limit, 0)]

    def search_keys(self, query: str, limit: int) -> list[str]:
        """Case-sensitive substring search, bounded by limit."""
        matches: list[str] = []
        if limit <= 0:
            return matches
        for key in self._cache:
            if query in key:
                matches.append(key)
                if len(matches) >= limit:
                    break
        return matches

    def get_size(self) -> int:
        return len(self._cache)

    def get_max_size(self) -> int:
        return self._max_size

    def __contains__(self, key: str) -> bool:
        return key in self._cache
