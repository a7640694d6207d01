"""
Observability Infrastructure

Structured logging for the opening hours library. Services obtain their
loggers through get_logger(); applications embedding the library call
setup_structured_logging() once at startup.
"""

import logging
import sys
from typing import Any

import structlog

from .config import settings


def setup_structured_logging(
    log_level: str | None = None, log_format: str | None = None
) -> None:
    """Configure structured logging with JSON or console output."""

    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    renderer = log_format or settings.LOG_FORMAT

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if renderer == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
