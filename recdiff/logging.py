"""Structured logging for recdiff, built on structlog.

Nothing is configured on import; until `setup_logging` runs, events go
through structlog's defaults.  Every logger carries a `component` under
the `recdiff` namespace, so consumers can filter the library's events.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

ROOT_COMPONENT = "recdiff"


def setup_logging(level: str = "info", stream: IO[str] | None = None) -> None:
    """Configure structlog for JSON lines on `stream` (stderr by default)."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger bound to `recdiff.<component>`, or to `recdiff` itself."""
    name = f"{ROOT_COMPONENT}.{component}" if component else ROOT_COMPONENT
    return structlog.get_logger(component=name)  # type: ignore[return-value]
