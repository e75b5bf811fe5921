"""Logging configuration for dockrun."""

# Standard library imports
import logging
import sys

# Third-party imports
import structlog

# Local application imports
from .._version import __version__
from ..config import settings


def setup_logging() -> None:
    """Configure structured logging.

    dockrun logs through structlog in every module; test suites that want
    readable output call this once, typically from a conftest.
    """
    config = settings.logging

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.level.upper(), logging.INFO),
    )

    # Configure processors based on format preference
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_library_context,
    ]

    if config.format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    configure_third_party_loggers()


def configure_third_party_loggers() -> None:
    """Configure logging levels for third-party libraries."""
    logging.getLogger("docker").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def add_library_context(logger, method_name, event_dict):
    """Add library context information to log entries."""
    event_dict["library"] = "dockrun"
    event_dict["version"] = __version__
    return event_dict
