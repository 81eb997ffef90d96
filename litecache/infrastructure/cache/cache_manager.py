#!/usr/bin/env python3
"""
Two-Tier Read-Through Cache Manager

Architecture:
    CacheManager (Public API)
        ├── MemoryTier (per-process LRU, advisory)
        ├── SQLiteCacheStore (durable, authoritative, written on the primary only)
        ├── LiteFSInstanceDirectory (who is primary right now)
        └── PrimaryForwarder (replica -> primary write relay)

Read path:
    memory tier -> durable store (a durable hit warms the memory tier)

Write path:
    The memory tier is always updated locally. On the primary the durable
    store is written in place; on a replica the write is forwarded and the
    caller does not wait for it.

Read-through (stale-while-revalidate):
    fresh           -> cached value, no compute
    stale in window -> cached value now, one background refresh per key
    otherwise       -> compute, write through, return

Concurrent callers for the same key share one in-flight compute.
"""

import asyncio
import inspect
import math
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from litecache.core.config.constants import CacheTier, Stage
from litecache.core.config.settings import Settings
from litecache.core.exceptions import LiteCacheError
from litecache.core.interfaces.cache import DurableStore, InstanceResolver
from litecache.core.logging.logger import get_logger, log_stage
from litecache.core.models import CacheEntry
from litecache.infrastructure.cache.forwarding import PrimaryForwarder
from litecache.infrastructure.cache.memory_tier import MemoryTier
from litecache.infrastructure.cache.sqlite_store import SQLiteCacheStore
from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory
from litecache.infrastructure.monitoring.metrics_collector import (
    MetricsCollector,
    get_metrics_collector,
)

logger = get_logger(__name__)

ComputeFn = Callable[[], Any | Awaitable[Any]]


class CacheManager:
    """
    Cache facade used by request handlers and the admin surface.

    Usage:
        value = await cache.read_through(
            "blog:post:42",
            lambda: load_post(42),
            ttl=60,
        )
    """

    def __init__(
        self,
        memory: MemoryTier,
        store: DurableStore,
        instances: InstanceResolver,
        forwarder: PrimaryForwarder,
        always_fresh: bool = False,
        metrics: MetricsCollector | None = None,
    ):
        self.memory = memory
        self.store = store
        self.instances = instances
        self.forwarder = forwarder
        self.always_fresh = always_fresh
        self._metrics = metrics or get_metrics_collector()

        self._inflight: dict[str, asyncio.Task] = {}
        self._revalidating: dict[str, asyncio.Task] = {}

    # =========================================================================
    # Key/value API
    # =========================================================================

    async def get(self, key: str) -> CacheEntry | None:
        """
        Look up `key` in the memory tier, then the durable store.

        Returns:
            The entry, or None on a miss. Entries whose value is null are misses.
        """
        entry = self.memory.get(key)
        if entry is not None and entry.value is not None:
            self._metrics.record_cache_hit(CacheTier.LRU.value)
            log_stage(logger, Stage.LRU_LOOKUP, "Memory tier hit", level="debug", cache_key=key)
            return entry

        entry = await self.store.get(key)
        if entry is not None:
            self.memory.set(key, entry)
            self._metrics.record_cache_hit(CacheTier.SQLITE.value)
            log_stage(logger, Stage.SQLITE_LOOKUP, "Durable store hit", level="debug", cache_key=key)
            return entry

        self._metrics.record_cache_miss()
        log_stage(logger, Stage.CACHE_LOOKUP, "Cache miss", level="debug", cache_key=key)
        return None

    async def set(self, key: str, entry: CacheEntry) -> None:
        self.memory.set(key, entry)

        info = await self.instances.get_instance_info()
        if info.current_is_primary:
            await self.store.set(key, entry)
            log_stage(logger, Stage.CACHE_WRITE, "Cache entry written", level="debug", cache_key=key)
        else:
            self.forwarder.forward(key, entry)
            log_stage(
                logger,
                Stage.CACHE_WRITE,
                "Cache write forwarded to primary",
                level="debug",
                cache_key=key,
                primary_instance=info.primary_instance,
            )

    async def delete(self, key: str) -> None:
        self.memory.delete(key)

        info = await self.instances.get_instance_info()
        if info.current_is_primary:
            await self.store.delete(key)
        else:
            self.forwarder.forward(key, None)

        log_stage(
            logger,
            Stage.CACHE_INVALIDATION,
            "Cache entry deleted",
            cache_key=key,
            forwarded=not info.current_is_primary,
        )

    async def set_local(self, key: str, entry: CacheEntry) -> None:
        """Apply a forwarded write on the primary."""
        await self.store.set(key, entry)
        self.memory.set(key, entry)

    async def delete_local(self, key: str) -> None:
        """Apply a forwarded delete on the primary."""
        await self.store.delete(key)
        self.memory.delete(key)

    def clear_key(self, key: str) -> bool:
        """Drop `key` from this process's memory tier only."""
        removed = self.memory.delete(key)
        log_stage(logger, Stage.CACHE_INVALIDATION, "Memory tier key cleared", cache_key=key, removed=removed)
        return removed

    # =========================================================================
    # Read-through
    # =========================================================================

    async def read_through(
        self,
        key: str,
        compute: ComputeFn,
        ttl: float | None = None,
        swr: float | None = math.inf,
        force_fresh: bool = False,
    ) -> Any:
        """
        Return the cached value for `key`, computing it when needed.

        Args:
            key: Cache key
            compute: Zero-argument callable, sync or async
            ttl: Seconds the value stays fresh; None means forever
            swr: Seconds a stale value may still be served; inf/None means forever
            force_fresh: Skip the lookup and always compute

        Raises:
            Whatever `compute` raises; nothing stale is substituted.
        """
        if not (force_fresh or self.always_fresh):
            entry = await self.get(key)
            if entry is not None:
                now = time.time()
                if entry.metadata.is_fresh(now):
                    return entry.value
                if entry.metadata.is_stale_servable(now):
                    self._metrics.record_stale_served()
                    self._schedule_revalidation(key, compute, ttl, swr)
                    return entry.value

        return await self._compute_shared(key, compute, ttl, swr, mode="foreground")

    async def _compute_shared(
        self,
        key: str,
        compute: ComputeFn,
        ttl: float | None,
        swr: float | None,
        mode: str,
    ) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._compute_and_store(key, compute, ttl, swr, mode))
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._forget(self._inflight, key, done))
        else:
            log_stage(logger, Stage.COMPUTE, "Joining in-flight compute", level="debug", cache_key=key)

        # shield: one caller going away must not cancel the compute for the others
        return await asyncio.shield(task)

    async def _compute_and_store(
        self,
        key: str,
        compute: ComputeFn,
        ttl: float | None,
        swr: float | None,
        mode: str,
    ) -> Any:
        start = time.perf_counter()
        try:
            value = compute()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            self._metrics.record_compute(mode, "error", time.perf_counter() - start)
            log_stage(
                logger,
                Stage.COMPUTE,
                "Compute failed",
                level="warning",
                cache_key=key,
                mode=mode,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        duration = time.perf_counter() - start
        self._metrics.record_compute(mode, "success", duration)
        log_stage(
            logger,
            Stage.COMPUTE,
            "Value computed",
            level="debug",
            cache_key=key,
            mode=mode,
            duration_ms=round(duration * 1000, 2),
        )

        try:
            await self.set(key, CacheEntry.create(value, ttl=ttl, swr=swr))
        except LiteCacheError as e:
            # the computed value is still good, only caching it failed
            self._metrics.record_error(type(e).__name__, Stage.CACHE_WRITE.value)
            log_stage(
                logger,
                Stage.CACHE_WRITE,
                "Failed to cache computed value",
                level="error",
                cache_key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
        return value

    def _schedule_revalidation(
        self,
        key: str,
        compute: ComputeFn,
        ttl: float | None,
        swr: float | None,
    ) -> None:
        if key in self._revalidating:
            return

        task = asyncio.create_task(self._revalidate(key, compute, ttl, swr))
        self._revalidating[key] = task
        task.add_done_callback(lambda done: self._forget(self._revalidating, key, done))

    async def _revalidate(
        self,
        key: str,
        compute: ComputeFn,
        ttl: float | None,
        swr: float | None,
    ) -> None:
        log_stage(logger, Stage.REVALIDATION, "Background refresh started", level="debug", cache_key=key)
        try:
            await self._compute_shared(key, compute, ttl, swr, mode="background")
        except Exception as e:
            # the stale value keeps being served until the next refresh succeeds
            self._metrics.record_error(type(e).__name__, Stage.REVALIDATION.value)
            log_stage(
                logger,
                Stage.REVALIDATION,
                "Background refresh failed",
                level="error",
                cache_key=key,
                error=str(e),
                error_type=type(e).__name__,
            )

    @staticmethod
    def _forget(tasks: dict[str, asyncio.Task], key: str, done: asyncio.Task) -> None:
        if tasks.get(key) is done:
            del tasks[key]

    # =========================================================================
    # Introspection
    # =========================================================================

    async def list_keys(self, limit: int) -> dict[str, list[str]]:
        return {
            CacheTier.SQLITE.value: await self.store.list_keys(limit),
            CacheTier.LRU.value: self.memory.list_keys(limit),
        }

    async def search_keys(self, query: str, limit: int) -> dict[str, list[str]]:
        return {
            CacheTier.SQLITE.value: await self.store.search_keys(query, limit),
            CacheTier.LRU.value: self.memory.search_keys(query, limit),
        }

    async def drain(self) -> None:
        """Wait for background refreshes, in-flight computes and pending forwards."""
        while self._revalidating or self._inflight:
            pending = list(self._revalidating.values()) + list(self._inflight.values())
            await asyncio.gather(*pending, return_exceptions=True)
        await self.forwarder.drain()

    def stats(self) -> dict[str, Any]:
        return {
            "lru": {
                "size": self.memory.get_size(),
                "max_size": self.memory.get_max_size(),
            },
            "sqlite": {"path": str(self.store.db_path)},
            "inflight_computes": len(self._inflight),
            "background_refreshes": len(self._revalidating),
            "pending_forwards": self.forwarder.pending_count,
            "always_fresh": self.always_fresh,
        }

    async def health_check(self) -> dict[str, Any]:
        info = await self.instances.get_instance_info()
        sqlite_health = await self.store.health_check()
        return {
            "status": "healthy" if sqlite_health["status"] == "healthy" else "degraded",
            "instance": info.to_wire(),
            "sqlite": sqlite_health,
            "lru": self.stats()["lru"],
        }


def build_cache_manager(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CacheManager:
    """
    Wire a CacheManager and its resources from settings.

    Args:
        settings: Application settings
        transport: Optional httpx transport for the forwarder (tests)
    """
    instances = LiteFSInstanceDirectory.from_settings(settings)
    forwarder = PrimaryForwarder(
        instances,
        token=settings.security.INTERNAL_COMMAND_TOKEN,
        timeout=settings.instances.FORWARD_TIMEOUT_SECONDS,
        transport=transport,
    )
    return CacheManager(
        memory=MemoryTier(settings.cache.CACHE_LRU_MAX_SIZE),
        store=SQLiteCacheStore(settings.cache.CACHE_DATABASE_PATH, instances),
        instances=instances,
        forwarder=forwarder,
        always_fresh=settings.is_development,
    )


async def close_cache_manager(cache: CacheManager) -> None:
    """Drain background work, close the forwarder client and the database."""
    await cache.drain()
    await cache.forwarder.aclose()
    cache.store.close()
    log_stage(logger, Stage.CLEANUP, "Cache resources closed")
