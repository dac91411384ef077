"""
Structured logging configuration for xmlout.
Provides console or JSON-structured logging via structlog.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import OutputSettings, get_settings


def configure_logging(settings: Optional[OutputSettings] = None) -> None:
    """Configure structured logging for applications embedding xmlout."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "console":
        # Human-readable console output for development
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

