"""Structured logging configuration for swimcoach.

Usage:
    from swimcoach.logging import get_logger, configure_logging

    # Call once at application startup
    configure_logging()

    # Get a logger in any module
    logger = get_logger(__name__)
    logger.info("entries_import_started", source="meet.csv")

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    LOG_FORMAT: json, console (default: console for dev, json for prod)
    ENVIRONMENT: local, development, production (default: development)
"""

import logging
import os
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog


def _get_environment() -> str:
    """Get current environment."""
    return os.getenv("ENVIRONMENT", "development").lower()


def _get_log_level() -> int:
    """Get log level from environment."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def _get_log_format() -> str:
    """Get log format - json for prod, console for dev."""
    explicit = os.getenv("LOG_FORMAT")
    if explicit:
        return explicit.lower()
    return "json" if _get_environment() == "production" else "console"


def _add_environment(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add environment to all log entries."""
    event_dict["environment"] = _get_environment()
    return event_dict


def configure_logging() -> None:
    """Configure structlog for the application.

    Call this once at startup (API lifespan or CLI callback).
    """
    log_format = _get_log_format()
    log_level = _get_log_level()

    shared_processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_environment,
    ]

    if log_format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("supabase").setLevel(logging.WARNING)
    logging.getLogger("postgrest").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module

    Returns:
        A configured structlog logger
    """
    return structlog.get_logger(name)


def bound_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Bind context variables for the duration of a with-block.

    Example:
        with bound_context(import_source="entries", file_name="meet.csv"):
            logger.info("entries_import_started")
    """
    return structlog.contextvars.bound_contextvars(**kwargs)

