"""Structured logging configuration.

All log output goes to stderr; stdout is reserved for command results
printed by the CLI.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from tablestore.infrastructure.config import ObservabilityConfig

# Standard-library loggers that stay at WARNING unless DEBUG is requested
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _renderer(log_format: str) -> Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """
    Set up structured logging with structlog.

    Args:
        config: Observability settings (level and format); defaults
            to INFO with JSON lines.
    """
    config = config or ObservabilityConfig()
    level = getattr(logging, config.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if level == logging.DEBUG else logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(config.log_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a structlog logger, optionally bound to ``initial_context``."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
