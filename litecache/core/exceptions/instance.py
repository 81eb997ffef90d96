"""
Instance-Related Exceptions

Errors raised while resolving or routing to instances of a multi-region deployment.
"""

from litecache.core.config.constants import HEADER_FLY_REPLAY
from litecache.core.exceptions.base import LiteCacheError


class InstanceError(LiteCacheError):
    """Base exception for instance resolution errors."""
    pass


class InstanceNotFoundError(InstanceError):
    """Raised when an admin operation targets an instance id nobody knows about."""

    status_code = 404


class InstanceReplayRequired(InstanceError):
    """
    Raised when a request must be handled by another instance.

    The response carries a `fly-replay` header; the edge proxy replays the
    original request on the named instance instead of returning it to the client.
    """

    status_code = 409

    def __init__(self, instance: str, message: str | None = None, **kwargs):
        super().__init__(
            message or f"Replaying request to instance {instance}",
            headers={HEADER_FLY_REPLAY: f"instance={instance}"},
            **kwargs,
        )
        self.instance = instance
        self.details.setdefault("instance", instance)
