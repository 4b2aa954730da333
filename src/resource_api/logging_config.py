"""Structured logging for the Resource API.

`configure_logging` is called once from the app lifespan with the loaded
settings. Modules take their logger through `get_logger(__name__)`; request
context (correlation_id, method, path) is merged in from contextvars.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from .config import Settings


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=False)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(settings: Settings) -> None:
    """Route stdlib and structlog output to stdout in the configured format."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=settings.service_name)

    get_logger(__name__).info(
        "logging_configured",
        log_format=settings.log_format,
        log_level=settings.log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger named after the calling module."""
    return structlog.get_logger(name)
