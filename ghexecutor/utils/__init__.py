"""
Utility functions and helpers.

Shared command execution and logging helpers.
"""

from ghexecutor.utils.command import CommandResult, format_command, run_command
from ghexecutor.utils.logging import configure_logging, get_logger

__all__ = [
    "CommandResult",
    "format_command",
    "run_command",
    "configure_logging",
    "get_logger",
]
