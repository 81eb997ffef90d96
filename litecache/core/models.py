"""
Cache Domain Models

CacheEntry / CacheMetadata are the unit stored in both tiers and sent over the
forwarding hop. The wire names (createdTime, ttl, swr) are camelCase so the
durable JSON and the forwarding body stay compatible across nodes.

Freshness rules (all values in seconds):
    fresh:     ttl is None or now < createdTime + ttl
    stale:     not fresh, and swr is None or now < createdTime + ttl + swr
    expired:   neither
"""

import math
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _finite_or_none(value: float | None) -> float | None:
    if value is None or math.isinf(value):
        return None
    return float(value)


class CacheMetadata(BaseModel):
    """Freshness metadata for a cached value."""

    model_config = ConfigDict(populate_by_name=True)

    created_time: float = Field(alias="createdTime", description="Epoch seconds when computed")
    ttl: float | None = Field(default=None, description="Seconds until stale; None = never")
    swr: float | None = Field(default=None, description="Stale window after ttl; None = unbounded")

    def is_fresh(self, now: float | None = None) -> bool:
        if self.ttl is None:
            return True
        now = time.time() if now is None else now
        return now < self.created_time + self.ttl

    def is_stale_servable(self, now: float | None = None) -> bool:
        """True when the entry is stale but still inside its revalidation window."""
        if self.is_fresh(now):
            return False
        if self.swr is None:
            return True
        now = time.time() if now is None else now
        return now < self.created_time + self.ttl + self.swr


class CacheEntry(BaseModel):
    """A cached value plus its metadata."""

    model_config = ConfigDict(populate_by_name=True)

    metadata: CacheMetadata
    value: Any = None

    @classmethod
    def create(
        cls,
        value: Any,
        ttl: float | None = None,
        swr: float | None = math.inf,
        now: float | None = None,
    ) -> "CacheEntry":
        """
        Build an entry for a freshly computed value.

        Infinite ttl/swr are stored as None so the metadata stays valid JSON.
        """
        return cls(
            metadata=CacheMetadata(
                created_time=time.time() if now is None else now,
                ttl=_finite_or_none(ttl),
                swr=_finite_or_none(swr),
            ),
            value=value,
        )

    def to_wire(self) -> dict[str, Any]:
        """Dict form used for durable JSON and forwarding bodies."""
        return self.model_dump(by_alias=True, mode="json")


class InstanceInfo(BaseModel):
    """Which node is serving the request and which node may write."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    current_instance: str = Field(alias="currentInstance")
    primary_instance: str = Field(alias="primaryInstance")

    @property
    def current_is_primary(self) -> bool:
        return self.current_instance == self.primary_instance

    def to_wire(self) -> dict[str, Any]:
        return {
            "currentInstance": self.current_instance,
            "primaryInstance": self.primary_instance,
            "currentIsPrimary": self.current_is_primary,
        }
