"""
Middleware Package

- error_handler: LiteCacheError rendering and the catch-all error middleware
"""

from litecache.application.api.middleware.error_handler import (
    ErrorHandlingMiddleware,
    handle_litecache_error,
)

__all__ = ["ErrorHandlingMiddleware", "handle_litecache_error"]
