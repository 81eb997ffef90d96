"""
Base Exception Class

This module contains ONLY the base exception class that all other exceptions inherit from.
All specialized exceptions are in their respective themed modules.
"""

from typing import Any


class LiteCacheError(Exception):
    """
    Base exception for all cache service errors.

    All custom exceptions inherit from this class to enable:
    - Consistent error handling (one FastAPI exception handler)
    - Request ID correlation
    - Structured error logging

    Attributes:
        message: Error message
        request_id: Request ID for correlation (if available)
        details: Additional error details (dict)
        status_code: HTTP status used when the error reaches the API layer
        headers: Extra HTTP headers for the error response

    Example:
        raise InstanceNotFoundError(
            "Instance abc123 not found",
            details={"instance": "abc123"},
        )
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        request_id: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.request_id = request_id
        self.details = (details or {}).copy()
        self.headers = (headers or {}).copy()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for logging/API responses.

        Returns:
            Dict with error_type, message, request_id, and details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "request_id": self.request_id,
            "details": self.details,
        }

    def with_context(self, **context) -> "LiteCacheError":
        """
        Add additional context to the error details.

        Returns:
            Self (for method chaining)
        """
        self.details.update(context)
        return self

    def __repr__(self) -> str:
        details_str = f", details={self.details}" if self.details else ""
        request_id_str = f", request_id='{self.request_id}'" if self.request_id else ""
        return f"{self.__class__.__name__}(message='{self.message}'{request_id_str}{details_str})"

    @classmethod
    def from_exception(
        cls,
        exc: Exception,
        message: str | None = None,
        request_id: str | None = None,
        **details
    ) -> "LiteCacheError":
        """
        Create an error from another exception.

        Useful for wrapping sqlite3 / httpx exceptions with additional context.

        Example:
            >>> try:
            ...     conn.execute("SELECT 1")
            ... except sqlite3.DatabaseError as e:
            ...     raise CacheStorageError.from_exception(e, path="/data/cache.db")
        """
        error_message = message or str(exc)
        error_details = {
            "original_error": exc.__class__.__name__,
            "original_message": str(exc),
            **details
        }
        return cls(error_message, request_id=request_id, details=error_details)


class ConfigurationError(LiteCacheError):
    """Raised when configuration is invalid or missing."""
    pass
