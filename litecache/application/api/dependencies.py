"""
FastAPI Dependency Injection Module
===================================

Reusable dependencies for route handlers.

RESOURCES
---------
The cache manager (and through it the memory tier, the SQLite store, the
instance directory and the forwarder) is built once in the application
lifespan and stored on `app.state`. Handlers receive it through
`CacheManagerDep`; tests build an app around their own settings and get a
fully isolated set of resources.

TRUST BOUNDARIES
----------------
- `require_internal_token`: the replica -> primary forwarding endpoint. The
  `auth` header must equal INTERNAL_COMMAND_TOKEN.
- `require_admin_token`: the admin surface. The operator token is read from
  the `token` query parameter or an `Authorization: Bearer` header and must
  equal ADMIN_TOKEN.

An unset token rejects every request. Comparisons are constant-time.

Example:
    @router.get("/cache", dependencies=[Depends(require_admin_token)])
    async def list_keys(cache: CacheManagerDep):
        return await cache.list_keys(100)
"""

import hmac
from typing import Annotated

from fastapi import Depends, Header, Request

from litecache.core.config.settings import Settings
from litecache.core.exceptions import ConfigurationError, UnauthorizedError
from litecache.core.logging.logger import get_logger
from litecache.infrastructure.cache.cache_manager import CacheManager
from litecache.infrastructure.instances.litefs import LiteFSInstanceDirectory

logger = get_logger(__name__)


# ============================================================================
# RESOURCE DEPENDENCIES
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_cache_manager(request: Request) -> CacheManager:
    """
    Retrieve the CacheManager from application state.

    Raises:
        ConfigurationError: If the lifespan startup did not run
    """
    cache = getattr(request.app.state, "cache_manager", None)
    if cache is None:
        raise ConfigurationError(
            "CacheManager not initialized in app.state. "
            "This indicates the application lifespan startup didn't complete properly."
        )
    return cache


def get_instance_directory(
    cache: Annotated[CacheManager, Depends(get_cache_manager)],
) -> LiteFSInstanceDirectory:
    return cache.instances


# ============================================================================
# AUTHENTICATION
# ============================================================================


def _tokens_match(provided: str | None, expected: str | None) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_internal_token(
    settings: Annotated[Settings, Depends(get_app_settings)],
    auth: Annotated[str | None, Header()] = None,
) -> None:
    """
    Guard for the forwarding endpoint.

    Raises:
        UnauthorizedError: Missing or wrong `auth` header
    """
    if not _tokens_match(auth, settings.security.INTERNAL_COMMAND_TOKEN):
        logger.warning("Rejected forwarded write with invalid internal token")
        raise UnauthorizedError("Unauthorized")


def require_admin_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """
    Guard for the admin surface.

    Raises:
        UnauthorizedError: Missing or wrong operator token
    """
    token = request.query_params.get("token")
    if not token and authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()

    if not _tokens_match(token, settings.security.ADMIN_TOKEN):
        logger.warning("Rejected admin request with invalid token", path=request.url.path)
        raise UnauthorizedError("Unauthorized")


# ============================================================================
# TYPE ALIASES FOR CLEANER ROUTE SIGNATURES
# ============================================================================

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
CacheManagerDep = Annotated[CacheManager, Depends(get_cache_manager)]
InstanceDirectoryDep = Annotated[LiteFSInstanceDirectory, Depends(get_instance_directory)]
