#!/usr/bin/env python3
"""
Primary Forwarder

Replicas never write the SQLite file; LiteFS would reject it and the write
would be lost on the next replication anyway. Instead each write or delete
is relayed to the primary's internal endpoint:

    POST {primary}/cache/sqlite
    auth: <INTERNAL_COMMAND_TOKEN>
    {"key": "...", "cacheValue": {...} | null}

Semantics: at-most-once, best-effort.
- The caller gets an asyncio.Task back and is not expected to await it
- Non-2xx and network errors are logged with the key and entry, then dropped
- Nothing is retried; concurrent forwards for one key land last-write-wins

Pending tasks are tracked so shutdown (and tests) can drain them.
"""

import asyncio
from typing import Any

import httpx

from litecache.core.config.constants import FORWARDING_PATH, HEADER_INTERNAL_AUTH, Stage
from litecache.core.exceptions import LiteCacheError
from litecache.core.logging.logger import get_logger, log_stage
from litecache.core.models import CacheEntry
from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory
from litecache.infrastructure.monitoring.metrics_collector import (
    MetricsCollector,
    get_metrics_collector,
)

logger = get_logger(__name__)


class PrimaryForwarder:
    """
    Fire-and-forget relay of cache writes to the primary instance.

    Usage:
        forwarder = PrimaryForwarder(instances, token="secret")
        forwarder.forward("blog:post", entry)   # set
        forwarder.forward("blog:post", None)    # delete
        await forwarder.aclose()
    """

    def __init__(
        self,
        instances: LiteFSInstanceDirectory,
        token: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics: MetricsCollector | None = None,
    ):
        self._instances = instances
        self._token = token
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)
        self._metrics = metrics or get_metrics_collector()
        self._pending: set[asyncio.Task] = set()

        if not token:
            log_stage(
                logger,
                Stage.FORWARDING,
                "INTERNAL_COMMAND_TOKEN is not set, the primary will reject forwarded writes",
                level="warning",
            )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def forward(self, key: str, entry: CacheEntry | None) -> asyncio.Task:
        """
        Schedule one forwarded write (entry) or delete (None).

        Must be called from a running event loop.
        """
        task = asyncio.create_task(self._send(key, entry), name=f"forward:{key}")
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Unexpected error in forwarding task",
                stage=Stage.FORWARDING.value,
                task=task.get_name(),
                error=str(error),
                error_type=type(error).__name__,
            )

    async def _send(self, key: str, entry: CacheEntry | None) -> bool:
        operation = "set" if entry is not None else "delete"
        verb = "updating" if entry is not None else "deleting"
        wire_entry: dict[str, Any] | None = entry.to_wire() if entry is not None else None
        primary = None

        try:
            info = await self._instances.get_instance_info()
            primary = info.primary_instance
            url = self._instances.get_instance_base_url(primary) + FORWARDING_PATH
            response = await self._client.post(
                url,
                json={"key": key, "cacheValue": wire_entry},
                headers={HEADER_INTERNAL_AUTH: self._token or ""},
            )
        except (httpx.HTTPError, LiteCacheError) as e:
            self._metrics.record_forward(operation, "error")
            log_stage(
                logger,
                Stage.FORWARDING,
                f'Error {verb} cache value for key "{key}" on primary instance ({primary})',
                level="error",
                cache_key=key,
                primary_instance=primary,
                error=str(e),
                error_type=type(e).__name__,
                entry=wire_entry,
            )
            return False

        if not response.is_success:
            self._metrics.record_forward(operation, "rejected")
            log_stage(
                logger,
                Stage.FORWARDING,
                f'Error {verb} cache value for key "{key}" on primary instance ({primary}): '
                f"{response.status_code} {response.reason_phrase}",
                level="error",
                cache_key=key,
                primary_instance=primary,
                status_code=response.status_code,
                entry=wire_entry,
            )
            return False

        self._metrics.record_forward(operation, "success")
        log_stage(
            logger,
            Stage.FORWARDING,
            "Forwarded cache write to primary",
            level="debug",
            cache_key=key,
            operation=operation,
            primary_instance=primary,
        )
        return True

    async def drain(self) -> None:
        """Wait for every pending forward to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self._client.aclose()
