"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Literal

import structlog

from jwt_revocation.config import Settings, get_settings


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
) -> None:
    """Configure structured logging with structlog.

    Library modules log through ``logging.getLogger(__name__)``; callers
    embedding the library invoke this once at startup.

    Args:
        log_level: Standard Python log level name (INFO, DEBUG, etc.).
        log_format: ``"json"`` for machine-readable output or ``"console"``
            for coloured human-readable output during local development.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # The Redis client is chatty at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure logging from ``Settings.log_level`` and ``Settings.log_format``."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
