#!/usr/bin/env python3
"""
Structured Logging Module using structlog

This module provides structured logging with:
- Request ID correlation across the forwarding hop (replica -> primary)
- Stage numbering for cache execution flow
- JSON formatting for log aggregation
- Redaction of shared secrets that end up in messages

Architectural Decision: structlog for production logging
- Context-aware logging with automatic field injection
- JSON output in production, colored console output in development
"""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from litecache.core.config.settings import get_settings

# Context variable for the request ID of the current request
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

_TOKEN_PATTERN = re.compile(r"(token=)[^&\s]+", re.IGNORECASE)
_BEARER_PATTERN = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)


def add_request_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add request ID to log event from context variable.

    STAGE-L.1: Request ID injection
    """
    request_id = request_id_ctx.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add ISO timestamp to log event.

    STAGE-L.2: Timestamp injection
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Redact admin tokens and bearer credentials from log messages.

    STAGE-L.3: Secret redaction

    Admin URLs carry `?token=...`, so request paths logged on errors would
    otherwise leak the operator token.
    """
    message = event_dict.get("event", "")

    if isinstance(message, str):
        message = _TOKEN_PATTERN.sub(r"\1[REDACTED]", message)
        message = _BEARER_PATTERN.sub(r"\1[REDACTED]", message)
        event_dict["event"] = message

    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Uppercase the log level name.

    STAGE-L.4: Log level injection
    """
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    STAGE-L: Logging initialization

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_request_id,
            add_timestamp,
            structlog.stdlib.add_log_level,
            add_log_level_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_secrets,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage="2.1")
    """
    return structlog.get_logger(name)


def set_request_id(request_id: str) -> None:
    """
    Set request ID in context for current request.

    STAGE-1.1: Request ID context initialization
    """
    request_id_ctx.set(request_id)


def get_request_id() -> str | None:
    """Get current request ID from context."""
    return request_id_ctx.get()


def clear_request_id() -> None:
    """
    Clear request ID from context.

    STAGE-6: Request ID context cleanup
    """
    request_id_ctx.set(None)


def log_stage(
    logger: structlog.stdlib.BoundLogger, stage: str, message: str, level: str = "info", **kwargs
) -> None:
    """
    Log a message with stage information.

    Usage:
        log_stage(logger, Stage.LRU_LOOKUP, "LRU cache hit", cache_key="blog:abc")
    """
    log_func = getattr(logger, level.lower())
    log_func(message, stage=str(getattr(stage, "value", stage)), **kwargs)
