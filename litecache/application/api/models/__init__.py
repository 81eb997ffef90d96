"""
API Models Package
==================

Pydantic models for API request/response validation.

- cache.py: forwarding endpoint and admin surface models
"""

from litecache.application.api.models.cache import (
    CacheKeys,
    CacheListResponse,
    CacheValueResponse,
    CurrentInstanceInfo,
    ForwardedWriteRequest,
    InstanceSummary,
    SuccessResponse,
)

__all__ = [
    "CacheKeys",
    "CacheListResponse",
    "CacheValueResponse",
    "CurrentInstanceInfo",
    "ForwardedWriteRequest",
    "InstanceSummary",
    "SuccessResponse",
]
