"""
Configuration Module

Centralized, type-safe configuration for the cache service.

- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: System-wide constants and enums (Stage, CacheTier, header names)

Usage:
------
```python
from litecache.core.config import get_settings
from litecache.core.config.constants import CacheTier

settings = get_settings()
db_path = settings.cache.CACHE_DATABASE_PATH
```

Testing:
-------
```python
import os
from litecache.core.config import reload_settings

os.environ["CACHE_DATABASE_PATH"] = "/tmp/cache.db"
settings = reload_settings()
```
"""

from litecache.core.config.constants import (
    CACHE_TABLE_NAME,
    DEFAULT_KEY_LIMIT,
    FORWARDING_PATH,
    HEADER_FLY_REPLAY,
    HEADER_INTERNAL_AUTH,
    HEADER_REQUEST_ID,
    LITEFS_PRIMARY_FILE,
    LRU_CACHE_MAX_SIZE,
    CacheTier,
    Stage,
)
from litecache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "CacheTier",
    # Cache
    "CACHE_TABLE_NAME",
    "DEFAULT_KEY_LIMIT",
    "LRU_CACHE_MAX_SIZE",
    # Replication
    "FORWARDING_PATH",
    "LITEFS_PRIMARY_FILE",
    # HTTP headers
    "HEADER_FLY_REPLAY",
    "HEADER_INTERNAL_AUTH",
    "HEADER_REQUEST_ID",
]
