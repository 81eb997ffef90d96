"""
Cache-Related Exceptions

All exceptions related to caching operations (SQLite store, LRU tier, admin tier selection).
"""

from litecache.core.exceptions.base import LiteCacheError


class CacheError(LiteCacheError):
    """Base exception for cache-related errors."""
    pass


class CacheStorageError(CacheError):
    """
    Raised when the durable SQLite store is unusable.

    Common causes:
    - Corrupt database file that survived one wipe-and-recreate
    - Disk full / permission denied on the cache file
    """
    pass


class UnknownCacheTierError(CacheError):
    """
    Raised when an admin operation names a tier other than `sqlite` or `lru`.

    This is a configuration error on the caller's side, surfaced as a 500.
    """
    pass
