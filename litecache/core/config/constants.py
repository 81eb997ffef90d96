"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the cache service.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers and wire names
- Type-safe enums for tiers and stages
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Cache processing stages used as the `stage` field of log events.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    INITIALIZATION = "0.0_INITIALIZATION"
    INSTANCE_RESOLUTION = "1.0_INSTANCE_RESOLUTION"
    CACHE_LOOKUP = "2.0_CACHE_LOOKUP"
    LRU_LOOKUP = "2.1_LRU_LOOKUP"
    SQLITE_LOOKUP = "2.2_SQLITE_LOOKUP"
    CACHE_WRITE = "2.3_CACHE_WRITE"
    CACHE_INVALIDATION = "2.4_CACHE_INVALIDATION"
    COMPUTE = "2.5_COMPUTE"
    REVALIDATION = "2.6_BACKGROUND_REVALIDATION"
    FORWARDING = "3.0_PRIMARY_FORWARDING"
    STORAGE = "S_SQLITE_STORAGE"
    ADMIN = "A_ADMIN_SURFACE"
    CLEANUP = "6.0_CLEANUP"


class CacheTier(str, Enum):
    """
    Cache tiers as named on the admin surface.

    SQLITE: durable, replicated, authoritative
    LRU: per-process, advisory
    """

    SQLITE = "sqlite"
    LRU = "lru"


# ============================================================================
# Cache Configuration
# ============================================================================

LRU_CACHE_MAX_SIZE = 5000
DEFAULT_KEY_LIMIT = 100
CACHE_TABLE_NAME = "cache"

# ============================================================================
# Instance / Replication
# ============================================================================

LITEFS_PRIMARY_FILE = ".primary"
DEFAULT_INTERNAL_URL_TEMPLATE = "http://{instance}.vm.{app_name}.internal:{port}"
FORWARDING_PATH = "/cache/sqlite"

# ============================================================================
# HTTP Headers
# ============================================================================

HEADER_REQUEST_ID = "X-Request-ID"
HEADER_INTERNAL_AUTH = "auth"
HEADER_FLY_REPLAY = "fly-replay"
