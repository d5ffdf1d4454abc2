"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def resolve_level(level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its numeric value.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for fetch runs.

    Logs are written to stderr by default because stdout carries the fetched
    bodies. Every line gets the bound context (run id, component, URL), the
    level and an ISO timestamp.

    Args:
        level: Numeric level or level name (default: INFO).
        output: Output stream (default: stderr).
        json_format: JSON lines when True, console rendering otherwise.
    """
    numeric_level = resolve_level(level)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=output.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    # httpx logs every request through the standard library
    logging.basicConfig(format="%(message)s", stream=output, level=numeric_level)


def bind_run_context(run_id: str) -> None:
    """Tag all subsequent log lines with the run id."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    """Remove the run id from log lines."""
    structlog.contextvars.unbind_contextvars("run_id")
