"""Command execution utilities.

This module runs the external CLI tools (kubectl, gh) as child processes,
bounded by a timeout and terminated when the awaiting task is cancelled.
"""

import asyncio
import os
import shlex
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from ghexecutor.errors import CommandError
from ghexecutor.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of a finished external command.

    Attributes:
        argv: The command that was run
        returncode: Process exit code
        stdout: Decoded standard output
        stderr: Decoded standard error
        duration_seconds: Wall-clock run time
    """

    argv: List[str]
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float = 0.0


def format_command(argv: List[str]) -> str:
    """Render an argv list as a shell-quoted command line for display."""
    return shlex.join(argv)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _terminate(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        pass


async def run_command(
    argv: List[str],
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None,
    check: bool = True,
) -> CommandResult:
    """Run an external command and capture its output.

    The command is executed directly, without a shell. Values in ``env``
    are layered over the current environment for this child process only;
    they are never logged.

    Args:
        argv: Command and arguments as list
        timeout: Seconds to wait before the process is killed
        env: Extra environment variables for the child process
        check: Whether to raise on a non-zero exit code

    Returns:
        CommandResult with the captured output

    Raises:
        CommandError: If the command cannot be started, times out, or
            exits non-zero while ``check`` is set
        asyncio.CancelledError: If the awaiting task is cancelled; the
            child process is killed first
    """
    cmd_str = format_command(argv)
    logger.debug("command_started", command=cmd_str)

    child_env = {**os.environ, **env} if env else None

    start_time = time.monotonic()
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=child_env,
        )
    except OSError as e:
        raise CommandError(f"{argv[0]} could not be started: {e}", argv) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        _terminate(process)
        raise CommandError(f"{argv[0]} timed out after {timeout} seconds", argv) from None
    except asyncio.CancelledError:
        _terminate(process)
        raise
    duration = time.monotonic() - start_time

    result = CommandResult(
        argv=argv,
        returncode=process.returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        duration_seconds=duration,
    )
    logger.debug(
        "command_finished",
        command=cmd_str,
        exit_code=result.returncode,
        duration=round(duration, 3),
    )

    if check and result.returncode != 0:
        raise CommandError(
            f"{argv[0]} failed with exit code {result.returncode}: {result.stderr.strip()}",
            argv,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result
