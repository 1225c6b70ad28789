"""Logging configuration for alertmatter."""

import logging
import sys
from typing import cast

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from alertmatter import __version__
from alertmatter.config import Settings

# Libraries that log every outbound request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")


def add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Stamp every event with the service name and version."""
    event_dict.setdefault("service", "alertmatter")
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger from settings.

    Without ``verbose`` the HTTP client libraries are held at WARNING so each
    forwarded notification produces a single log line.
    """
    level = getattr(logging, settings.effective_log_level, logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    library_level = logging.DEBUG if settings.verbose else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            add_service,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return cast(structlog.BoundLogger, structlog.get_logger(name))
