"""
Authentication Exceptions

The forwarding endpoint and the admin surface are the only network-facing
trust boundaries of the service.
"""

from litecache.core.exceptions.base import LiteCacheError


class AuthError(LiteCacheError):
    """Base exception for authentication errors."""

    status_code = 401


class UnauthorizedError(AuthError):
    """Raised when a shared secret or admin token is missing or wrong."""
    pass
