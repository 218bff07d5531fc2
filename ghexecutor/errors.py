"""Exception hierarchy for gh-executor."""

from typing import List, Optional


class GHExecutorError(Exception):
    """Base exception for all gh-executor errors."""

    pass


class ConfigError(GHExecutorError):
    """Raised when the merged plugin configuration is invalid."""

    pass


class CommandError(GHExecutorError):
    """Raised when an external command fails, times out or cannot be started.

    Attributes:
        argv: The command that was run
        returncode: Exit code, or None if the process never finished
        stdout: Whatever the process wrote to stdout before failing
        stderr: Whatever the process wrote to stderr before failing
    """

    def __init__(
        self,
        message: str,
        argv: List[str],
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.argv = argv
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class RenderError(GHExecutorError):
    """Raised when the issue body template cannot be parsed or rendered."""

    pass


class PublishError(GHExecutorError):
    """Raised when the GitHub issue could not be created."""

    pass


class DependencyError(GHExecutorError):
    """Raised when a required CLI binary cannot be installed."""

    pass
