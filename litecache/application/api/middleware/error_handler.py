"""
Error Handling Middleware
=========================

Two layers of error handling:

1. `handle_litecache_error` (registered with `app.exception_handler`) turns
   every LiteCacheError into a JSON response using the exception's own
   status code and headers. This is how `InstanceReplayRequired` reaches the
   edge proxy as a 409 with a `fly-replay` header.

2. `ErrorHandlingMiddleware` is the catch-all for anything else. The client
   gets a generic 500; the full error is logged and counted.
"""

import traceback
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from litecache.core.config.constants import HEADER_REQUEST_ID
from litecache.core.exceptions import LiteCacheError
from litecache.core.logging.logger import get_logger, get_request_id
from litecache.infrastructure.monitoring.metrics_collector import get_metrics_collector

logger = get_logger(__name__)


async def handle_litecache_error(request: Request, exc: LiteCacheError) -> JSONResponse:
    """Render a LiteCacheError with its status code and headers."""
    if exc.request_id is None:
        exc.request_id = get_request_id()

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Request failed: {exc.message}",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
    )
    if exc.status_code >= 500:
        get_metrics_collector().record_error(type(exc).__name__, "api")

    headers = dict(exc.headers)
    if exc.request_id:
        headers[HEADER_REQUEST_ID] = exc.request_id

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last line of defense for exceptions no handler claimed.

    Internal details are only included in the response when
    include_traceback is set (development).
    """

    def __init__(self, app, include_traceback: bool = False):
        super().__init__(app)
        self.include_traceback = include_traceback

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            method = request.method
            path = request.url.path
            error_type = type(e).__name__

            logger.error(
                f"Unhandled exception in request: {method} {path}",
                method=method,
                path=path,
                error_type=error_type,
                error_message=str(e),
                exc_info=True,
            )

            get_metrics_collector().record_error(error_type, "unhandled_exception")

            error_response = {
                "error": "internal_server_error",
                "message": "An unexpected error occurred while processing your request",
                "error_type": error_type,
            }

            if self.include_traceback:
                error_response["traceback"] = traceback.format_exc()
                error_response["detail"] = str(e)

            return JSONResponse(status_code=500, content=error_response)
