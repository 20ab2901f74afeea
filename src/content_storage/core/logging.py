# src/content_storage/core/logging.py
"""Structured logging setup.

All modules log through structlog with key/value events:

    logger = get_logger(__name__)
    logger.warning("Retrieve failed", file_id=file_id, error=str(e))

configure_logging() is called once by entry points (CLI, services). Library
code never configures logging on import.
"""

import logging
import sys
from typing import Any

import structlog


class StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Root handler installed by configure_logging()."""


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render events as JSON lines instead of console output
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    # Replace only our own handler; handlers installed by the host stay untouched
    root = logging.getLogger()
    for existing in root.handlers[:]:
        if isinstance(existing, StderrHandler):
            root.removeHandler(existing)
    handler = StderrHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(log_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(name)
