"""Kubernetes diagnostics collected for an issue report.

Collection is best effort: a kubectl failure never aborts the request,
the issue is filed with whatever output was captured.
"""

from dataclasses import dataclass
from typing import List, Optional

from ghexecutor.errors import CommandError
from ghexecutor.utils.command import format_command, run_command
from ghexecutor.utils.logging import get_logger

logger = get_logger(__name__)

LOGS_TAIL_LINES = 150
DEFAULT_NAMESPACE = "default"


@dataclass
class IssueDetails:
    """All available information about a malfunctioning resource.

    Attributes:
        type: Resource identifier, e.g. "pod/nginx"
        namespace: Namespace the resource lives in
        logs: Tail of the resource logs
        version: Output of ``kubectl version -o yaml``
    """

    type: str
    namespace: str
    logs: str = ""
    version: str = ""


def build_logs_command(name: str, namespace: str, tail_lines: int = LOGS_TAIL_LINES) -> List[str]:
    """Build the kubectl command that tails the logs of a resource."""
    return ["kubectl", "logs", name, "-n", namespace, "--tail", str(tail_lines)]


def build_version_command() -> List[str]:
    """Build the kubectl command that prints client and server versions."""
    return ["kubectl", "version", "-o", "yaml"]


async def _run_best_effort(argv: List[str], timeout: Optional[float]) -> str:
    try:
        result = await run_command(argv, timeout=timeout)
        return result.stdout
    except CommandError as e:
        logger.warning(
            "diagnostics_degraded",
            command=format_command(argv),
            exit_code=e.returncode,
            error=str(e),
        )
        return e.stdout


async def collect_issue_details(
    namespace: str,
    name: str,
    tail_lines: int = LOGS_TAIL_LINES,
    timeout: Optional[float] = None,
    default_namespace: str = DEFAULT_NAMESPACE,
) -> IssueDetails:
    """Collect logs and cluster version for a resource.

    Args:
        namespace: Namespace of the resource; ``default_namespace`` if empty
        name: Resource identifier as accepted by ``kubectl logs``
        tail_lines: Number of log lines to fetch
        timeout: Per-command timeout in seconds
        default_namespace: Namespace used when ``namespace`` is empty

    Returns:
        IssueDetails, with empty or partial text for failed commands
    """
    if not namespace:
        namespace = default_namespace

    logs = await _run_best_effort(build_logs_command(name, namespace, tail_lines), timeout)
    version = await _run_best_effort(build_version_command(), timeout)

    return IssueDetails(
        type=name,
        namespace=namespace,
        logs=logs,
        version=version,
    )
