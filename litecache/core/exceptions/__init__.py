"""
Exception Module

Structured exception hierarchy for the cache service, organized by theme.

Module Structure:
-----------------
- **base.py**: LiteCacheError base class + ConfigurationError
- **cache.py**: Storage and tier selection errors
- **instance.py**: Instance resolution and replay errors
- **auth.py**: Shared-secret / admin token errors

Usage:
------
```python
from litecache.core.exceptions import CacheStorageError, InstanceNotFoundError
```
"""

from litecache.core.exceptions.auth import AuthError, UnauthorizedError
from litecache.core.exceptions.base import ConfigurationError, LiteCacheError
from litecache.core.exceptions.cache import (
    CacheError,
    CacheStorageError,
    UnknownCacheTierError,
)
from litecache.core.exceptions.instance import (
    InstanceError,
    InstanceNotFoundError,
    InstanceReplayRequired,
)

__all__ = [
    # Base
    "LiteCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "CacheStorageError",
    "UnknownCacheTierError",
    # Instance
    "InstanceError",
    "InstanceNotFoundError",
    "InstanceReplayRequired",
    # Auth
    "AuthError",
    "UnauthorizedError",
]
