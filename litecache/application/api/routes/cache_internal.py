"""
Primary-Forwarding Endpoint
===========================

POST /cache/sqlite is the only way a replica's cache write reaches the
durable store. It is called by PrimaryForwarder on replicas and must be
handled by the primary; any other node answers with a replay to the primary.
"""

from fastapi import APIRouter, Depends

from litecache.application.api.dependencies import (
    CacheManagerDep,
    InstanceDirectoryDep,
    require_internal_token,
)
from litecache.application.api.models.cache import ForwardedWriteRequest, SuccessResponse
from litecache.core.config.constants import FORWARDING_PATH, Stage
from litecache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

router = APIRouter(tags=["Internal"], dependencies=[Depends(require_internal_token)])


@router.post(FORWARDING_PATH, response_model=SuccessResponse)
async def apply_forwarded_write(
    body: ForwardedWriteRequest,
    cache: CacheManagerDep,
    instances: InstanceDirectoryDep,
):
    """Apply a write (cacheValue present) or delete (cacheValue null) on the primary."""
    await instances.ensure_primary()

    if body.cache_value is not None:
        await cache.set_local(body.key, body.cache_value)
        operation = "set"
    else:
        await cache.delete_local(body.key)
        operation = "delete"

    log_stage(
        logger,
        Stage.FORWARDING,
        "Applied forwarded cache write",
        level="debug",
        cache_key=body.key,
        operation=operation,
    )
    return SuccessResponse()
