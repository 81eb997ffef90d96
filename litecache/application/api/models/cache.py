"""
Cache API Models
================

Request/response models for the forwarding endpoint and the admin surface.

Wire names are camelCase (cacheKey, cacheValue, currentInstanceInfo) so
replicas and the admin UI speak the same JSON as the durable store. Models
accept snake_case too (populate_by_name) which keeps route code readable;
FastAPI serialises response models by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from litecache.core.models import CacheEntry


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Forwarding endpoint
# ============================================================================


class ForwardedWriteRequest(_CamelModel):
    """
    Body of POST /cache/sqlite.

    A missing or null cacheValue is a delete.
    """

    key: str = Field(..., min_length=1, description="Cache key")
    cache_value: CacheEntry | None = Field(
        default=None, alias="cacheValue", description="Entry to store; null deletes the key"
    )


class SuccessResponse(BaseModel):
    success: bool = True


# ============================================================================
# Admin surface
# ============================================================================


class CacheKeys(BaseModel):
    """Keys per tier, each list bounded by the request limit."""

    sqlite: list[str] = Field(default_factory=list)
    lru: list[str] = Field(default_factory=list)


class CurrentInstanceInfo(_CamelModel):
    current_instance: str = Field(alias="currentInstance")
    primary_instance: str = Field(alias="primaryInstance")
    current_is_primary: bool = Field(alias="currentIsPrimary")


class CacheListResponse(_CamelModel):
    """Response of GET /cache."""

    cache_keys: CacheKeys = Field(alias="cacheKeys")
    instance: str = Field(..., description="Instance whose keys are listed")
    instances: dict[str, str] = Field(..., description="Known instance id -> region")
    current_instance_info: CurrentInstanceInfo = Field(alias="currentInstanceInfo")


class InstanceSummary(_CamelModel):
    hostname: str
    region: str | None = None
    is_primary: bool = Field(alias="isPrimary")


class CacheValueResponse(_CamelModel):
    """Response of GET /cache/{type}/{cacheKey}."""

    instance: InstanceSummary
    cache_key: str = Field(alias="cacheKey")
    value: dict[str, Any] | None = Field(
        default=None, description="Entry (metadata + value) from the selected tier"
    )
