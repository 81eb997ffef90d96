"""
Cache Admin Routes
==================

Operator surface for inspecting and invalidating the cache of a specific
instance.

Every route takes an `instance` to act on. When a request lands on a
different node than the one it names, `ensure_instance` raises
InstanceReplayRequired and the edge proxy replays the request on the right
node. The memory tier is per process, so listing or clearing it only makes
sense on the instance that owns it.

Routes:
    GET  /cache?query=&limit=100&instance=    list or search keys
    POST /cache                               delete a key (form fields)
    GET  /cache/{type}/{cacheKey}?instance=   view one entry
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse

from litecache.application.api.dependencies import (
    CacheManagerDep,
    InstanceDirectoryDep,
    require_admin_token,
)
from litecache.application.api.models.cache import (
    CacheKeys,
    CacheListResponse,
    CacheValueResponse,
    CurrentInstanceInfo,
    InstanceSummary,
    SuccessResponse,
)
from litecache.core.config.constants import DEFAULT_KEY_LIMIT, CacheTier, Stage
from litecache.core.exceptions import UnknownCacheTierError
from litecache.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

router = APIRouter(
    prefix="/cache",
    tags=["Cache Admin"],
    dependencies=[Depends(require_admin_token)],
)


def _parse_tier(tier: str) -> CacheTier:
    try:
        return CacheTier(tier)
    except ValueError:
        raise UnknownCacheTierError(
            f"Unknown cache type: {tier}",
            details={"type": tier, "supported": [t.value for t in CacheTier]},
        ) from None


@router.get("", response_model=CacheListResponse, response_model_by_alias=True)
async def list_cache_keys(
    request: Request,
    cache: CacheManagerDep,
    instances: InstanceDirectoryDep,
    query: str | None = None,
    limit: Annotated[int, Query(ge=0)] = DEFAULT_KEY_LIMIT,
    instance: str | None = None,
):
    """
    List (or search) keys of both tiers on one instance.

    An empty `query` parameter redirects to the same URL without it, so a
    cleared search box lands on the plain listing.
    """
    if query == "":
        return RedirectResponse(str(request.url.remove_query_params("query")), status_code=302)

    info = await instances.get_instance_info()
    all_instances = await instances.get_all_instances()
    target = instance or info.current_instance
    await instances.ensure_instance(target)

    if query:
        keys = await cache.search_keys(query, limit)
    else:
        keys = await cache.list_keys(limit)

    return CacheListResponse(
        cache_keys=CacheKeys(**keys),
        instance=target,
        instances=all_instances,
        current_instance_info=CurrentInstanceInfo(**info.to_wire()),
    )


@router.post("", response_model=SuccessResponse)
async def delete_cache_key(
    cache: CacheManagerDep,
    instances: InstanceDirectoryDep,
    cache_key: Annotated[str, Form(alias="cacheKey")],
    tier: Annotated[str, Form(alias="type")],
    instance: Annotated[str | None, Form()] = None,
):
    """
    Delete one key from the selected tier of `instance`.

    - sqlite: full delete (memory tier + durable, forwarded from replicas)
    - lru: drop the key from this process's memory tier only
    """
    target = instance or (await instances.get_instance_info()).current_instance
    await instances.ensure_instance(target)

    selected = _parse_tier(tier)
    if selected is CacheTier.SQLITE:
        await cache.delete(cache_key)
    else:
        cache.clear_key(cache_key)

    log_stage(logger, Stage.ADMIN, "Cache key deleted by operator", cache_key=cache_key, tier=selected.value)
    return SuccessResponse()


@router.get("/{tier}/{cache_key:path}", response_model=CacheValueResponse, response_model_by_alias=True)
async def get_cache_value(
    tier: str,
    cache_key: str,
    cache: CacheManagerDep,
    instances: InstanceDirectoryDep,
    instance: str | None = None,
):
    """View the stored entry for one key in one tier, without touching LRU order."""
    info = await instances.get_instance_info()
    await instances.ensure_instance(instance or info.current_instance)

    selected = _parse_tier(tier)
    if selected is CacheTier.SQLITE:
        entry = await cache.store.get(cache_key)
    else:
        entry = cache.memory.peek(cache_key)

    all_instances = await instances.get_all_instances()
    return CacheValueResponse(
        instance=InstanceSummary(
            hostname=info.current_instance,
            region=all_instances.get(info.current_instance),
            is_primary=info.current_is_primary,
        ),
        cache_key=cache_key,
        value=entry.to_wire() if entry is not None else None,
    )
