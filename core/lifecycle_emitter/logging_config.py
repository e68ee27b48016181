"""
Structured Logging Configuration

Logging for the emitter is done with structlog:
- Console output for development
- JSON output for log aggregation
- Library name and version attached to every entry

The emitter never configures logging on its own. Applications call
``configure_logging`` (or ``EmitterConfig.configure_logging``) at startup;
otherwise structlog's defaults apply.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOGGER_NAME,
    LIBRARY_NAME,
    LIBRARY_VERSION,
)


def add_library_info(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add library information to log entries."""
    event_dict["library"] = LIBRARY_NAME
    event_dict["version"] = LIBRARY_VERSION
    return event_dict


def build_processors(
    json_output: bool = False,
    include_timestamps: bool = True,
) -> list[Processor]:
    """Build the structlog processor chain used by ``configure_logging``."""
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        add_library_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamps:
        shared_processors.insert(
            0,
            structlog.processors.TimeStamper(fmt="iso", utc=True)
        )

    if json_output:
        return shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    return shared_processors + [
        structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    json_output: bool = False,
    log_level: str = DEFAULT_LOG_LEVEL,
    include_timestamps: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        json_output: Output logs as JSON (for production)
        log_level: Minimum log level
        include_timestamps: Include ISO timestamps

    Usage:
        # Development
        configure_logging(json_output=False, log_level="DEBUG")

        # Production
        configure_logging(json_output=True, log_level="WARNING")
    """
    structlog.configure(
        processors=build_processors(
            json_output=json_output,
            include_timestamps=include_timestamps,
        ),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger.

    Usage:
        logger = get_logger(__name__)
        logger.error("Error in listener", event_name="ready")
    """
    return structlog.get_logger(name)
