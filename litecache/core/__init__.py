"""
Core Module

Foundational components: configuration, logging, exceptions, and domain models.
"""

from .exceptions import (
    CacheError,
    CacheStorageError,
    ConfigurationError,
    InstanceNotFoundError,
    InstanceReplayRequired,
    LiteCacheError,
    UnauthorizedError,
    UnknownCacheTierError,
)
from .logging import (
    clear_request_id,
    get_logger,
    get_request_id,
    log_stage,
    set_request_id,
    setup_logging,
)

__all__ = [
    # Exceptions
    "LiteCacheError",
    "ConfigurationError",
    "CacheError",
    "CacheStorageError",
    "UnknownCacheTierError",
    "InstanceNotFoundError",
    "InstanceReplayRequired",
    "UnauthorizedError",
    # Logging
    "clear_request_id",
    "get_logger",
    "get_request_id",
    "log_stage",
    "set_request_id",
    "setup_logging",
]
