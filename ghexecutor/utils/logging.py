"""Structured logging configuration for gh-executor.

The plugin response is written to stdout, so every log record goes to
stderr. Importing any gh-executor module sets up a WARNING-level default
unless the embedding application configured structlog itself; the CLI
reconfigures it from its ``--verbose`` flag.
"""

import logging
import sys
from typing import Any, Union

import structlog

DEFAULT_LEVEL = logging.WARNING


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Looked up per call so redirected streams (tests, CliRunner) are honored
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: Union[int, str] = DEFAULT_LEVEL) -> None:
    """Configure structlog for gh-executor.

    At DEBUG level every external command and its exit code is logged.
    At WARNING, only degraded diagnostics and template fallbacks are.

    Args:
        level: Logging level as a number (``logging.DEBUG``) or a name
            (``"debug"``, ``"WARNING"``)

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structlog logger, applying the default setup if needed."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]
