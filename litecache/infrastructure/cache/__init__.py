"""
Cache Module

Provides the two-tier read-through cache (in-memory LRU + SQLite on LiteFS).
"""

from .cache_manager import (
    CacheManager,
    build_cache_manager,
    close_cache_manager,
)
from .forwarding import PrimaryForwarder
from .memory_tier import MemoryTier
from .sqlite_store import SQLiteCacheStore

__all__ = [
    "CacheManager",
    "MemoryTier",
    "PrimaryForwarder",
    "SQLiteCacheStore",
    "build_cache_manager",
    "close_cache_manager",
]
