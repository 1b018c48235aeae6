"""Structured logging for the clone-tracker backend.

Usage::

    from backend.log import get_logger

    logger = get_logger("db.file_store")
    logger.info("website_created", website_id=3, url="https://example.com")

Events are rendered by ``structlog`` and handed to the standard ``logging``
machinery, so handlers installed by the host (uvicorn, pytest) still apply.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

from backend.config import settings

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def add_timestamp(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add an ISO format UTC timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def configure_logging(
    level: str = "info",
    format_type: str = "json",
    stream: Any = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (debug, info, warn, error).
        format_type: Output format, ``json`` or ``text``.
        stream: Output stream for the root handler (default: ``sys.stderr``).
    """
    log_level = _LEVELS.get(level.lower(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=log_level,
    )

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, bound to *name* when given."""
    logger = structlog.get_logger(name)
    if name:
        logger = logger.bind(logger_name=name)
    return logger


# Initialise from settings on import
configure_logging(settings.log_level, settings.log_format)
