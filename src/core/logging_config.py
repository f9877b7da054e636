"""Structured logging configuration.

This module initializes a structlog logger with a stable JSON format.
Loggers are created at import time; the minimum level is applied later
from the runtime configuration of each ingestion run.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def configure_logging(log_level: int) -> None:
    """Apply the JSON processor chain filtered at ``log_level``.

    Args:
        log_level: Minimum stdlib logging level to emit.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output.
    """
    if not structlog.is_configured():
        configure_logging(logging.getLevelName(DEFAULT_LOG_LEVEL))
    return structlog.get_logger(name)
