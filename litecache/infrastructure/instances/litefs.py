#!/usr/bin/env python3
"""
LiteFS Instance Directory

Resolves which node is serving the current request and which node is the
primary of a LiteFS cluster.

How LiteFS exposes the primary:
    LiteFS keeps a `.primary` file in its mount directory on every replica.
    The file holds the hostname of the current primary. On the primary itself
    the file does not exist.

Two read paths are kept on purpose:
    - get_instance_info_sync(): used while lazily opening the SQLite store,
      where nothing may be awaited.
    - get_instance_info(): used by every read/write decision at request time.
      The marker is read off the event loop thread and memoised briefly.
"""

import asyncio
import socket
import time
from pathlib import Path

from litecache.core.config.constants import LITEFS_PRIMARY_FILE, Stage
from litecache.core.config.settings import Settings
from litecache.core.exceptions import (
    ConfigurationError,
    InstanceNotFoundError,
    InstanceReplayRequired,
)
from litecache.core.logging.logger import get_logger, log_stage
from litecache.core.models import InstanceInfo

logger = get_logger(__name__)


class LiteFSInstanceDirectory:
    """
    Instance directory backed by the LiteFS primary marker file.

    The known instances (id -> region) come from configuration; the current
    instance is always part of that mapping.
    """

    def __init__(
        self,
        litefs_dir: str | Path,
        instance_id: str | None = None,
        region: str = "local",
        instances: dict[str, str] | None = None,
        cache_seconds: float = 1.0,
        app_name: str | None = None,
        internal_port: int = 8080,
        url_template: str = "http://{instance}.vm.{app_name}.internal:{port}",
    ):
        self._primary_file = Path(litefs_dir) / LITEFS_PRIMARY_FILE
        self._current = instance_id or socket.gethostname()
        self._region = region
        self._instances = dict(instances or {})
        self._cache_seconds = cache_seconds
        self._app_name = app_name
        self._internal_port = internal_port
        self._url_template = url_template

        self._cached_info: InstanceInfo | None = None
        self._cached_at = 0.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "LiteFSInstanceDirectory":
        config = settings.instances
        return cls(
            litefs_dir=config.LITEFS_DIR,
            instance_id=config.INSTANCE_ID,
            region=config.REGION,
            instances=config.INSTANCES,
            cache_seconds=config.INSTANCE_INFO_CACHE_SECONDS,
            app_name=config.FLY_APP_NAME,
            internal_port=config.INTERNAL_PORT,
            url_template=config.INTERNAL_URL_TEMPLATE,
        )

    # -------------------------------------------------------------------------
    # Current / primary resolution
    # -------------------------------------------------------------------------

    def get_current_instance_sync(self) -> str:
        """Current instance id. Never blocks."""
        return self._current

    def _read_primary(self) -> str:
        try:
            primary = self._primary_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return self._current
        except OSError as e:
            log_stage(
                logger,
                Stage.INSTANCE_RESOLUTION,
                "Could not read LiteFS primary marker, assuming current instance is primary",
                level="warning",
                path=str(self._primary_file),
                error=str(e),
            )
            return self._current
        return primary or self._current

    def get_instance_info_sync(self) -> InstanceInfo:
        """Synchronous marker read, for store bootstrap only."""
        return InstanceInfo(current_instance=self._current, primary_instance=self._read_primary())

    async def get_instance_info(self) -> InstanceInfo:
        """
        Authoritative instance info for request-time decisions.

        Returns:
            InstanceInfo with current/primary ids
        """
        now = time.monotonic()
        if self._cached_info is not None and now - self._cached_at < self._cache_seconds:
            return self._cached_info

        primary = await asyncio.to_thread(self._read_primary)
        info = InstanceInfo(current_instance=self._current, primary_instance=primary)

        if self._cached_info is None or self._cached_info.primary_instance != primary:
            log_stage(
                logger,
                Stage.INSTANCE_RESOLUTION,
                "Primary instance resolved",
                current_instance=self._current,
                primary_instance=primary,
                current_is_primary=info.current_is_primary,
            )

        self._cached_info = info
        self._cached_at = now
        return info

    async def get_all_instances(self) -> dict[str, str]:
        """Known instances mapped to their region."""
        instances = dict(self._instances)
        instances.setdefault(self._current, self._region)
        return instances

    # -------------------------------------------------------------------------
    # Routing guards
    # -------------------------------------------------------------------------

    async def ensure_instance(self, instance: str) -> None:
        """
        Make sure the request is being handled by `instance`.

        Raises:
            InstanceNotFoundError: `instance` is not a known id
            InstanceReplayRequired: `instance` is known but is another node
        """
        info = await self.get_instance_info()
        if instance == info.current_instance:
            return

        instances = await self.get_all_instances()
        if instance not in instances:
            raise InstanceNotFoundError(
                f"Instance {instance} not found",
                details={"instance": instance, "known_instances": sorted(instances)},
            )

        raise InstanceReplayRequired(instance)

    async def ensure_primary(self) -> None:
        """Make sure the request is being handled by the primary."""
        info = await self.get_instance_info()
        if not info.current_is_primary:
            raise InstanceReplayRequired(info.primary_instance)

    def get_instance_base_url(self, instance: str) -> str:
        """Internal base URL of `instance`."""
        if "{app_name}" in self._url_template and not self._app_name:
            raise ConfigurationError(
                "FLY_APP_NAME is required to build internal instance URLs",
                details={"template": self._url_template},
            )
        return self._url_template.format(
            instance=instance,
            app_name=self._app_name,
            port=self._internal_port,
        ).rstrip("/")
