"""Structured logging configuration using *structlog*."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def _level_number(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    *,
    stream: TextIO | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure *structlog* for the engine.

    Call once at application startup.

    Parameters
    ----------
    level : str
        Minimum level name; unknown names fall back to ``INFO``.
    stream : file-like
        Destination for log lines.  Defaults to stderr, leaving stdout to
        the CLI's JSON results.
    json_output : bool
        Force JSON (``True``) or console (``False``) rendering.  When
        ``None`` the console renderer is used only on a TTY.
    """
    out = stream or sys.stderr
    if json_output is None:
        json_output = not out.isatty()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )
