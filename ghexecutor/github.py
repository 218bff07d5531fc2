"""GitHub issue publishing through the gh CLI."""

from typing import List, Optional

from ghexecutor.config import GitHubConfig
from ghexecutor.errors import CommandError, PublishError
from ghexecutor.utils.command import run_command
from ghexecutor.utils.logging import get_logger

logger = get_logger(__name__)

ISSUE_LABEL = "bug"
TOKEN_ENV_VAR = "GH_TOKEN"


def issue_title(resource: str) -> str:
    """Title used for the issue filed about ``resource``."""
    return f"The `{resource}` malfunctions"


def build_issue_create_command(repository: str, title: str, body: str) -> List[str]:
    """Build the gh command that creates an issue.

    The token is deliberately absent; it travels in the child environment.
    """
    return [
        "gh", "issue", "create",
        "--title", title,
        "--body", body,
        "--label", ISSUE_LABEL,
        "-R", repository,
    ]


async def create_issue(
    github: GitHubConfig,
    title: str,
    body: str,
    timeout: Optional[float] = None,
) -> str:
    """Create a GitHub issue and return its URL.

    Args:
        github: GitHub settings with the token and target repository
        title: Issue title
        body: Rendered Markdown body
        timeout: Seconds to wait for gh

    Returns:
        URL of the new issue as printed by gh

    Raises:
        PublishError: If the settings are incomplete or gh fails
    """
    if not github.repository:
        raise PublishError("GitHub repository is not configured")
    if not github.token:
        raise PublishError("GitHub token is not configured")

    cmd = build_issue_create_command(github.repository, title, body)
    try:
        result = await run_command(cmd, timeout=timeout, env={TOKEN_ENV_VAR: github.token})
    except CommandError as e:
        raise PublishError(f"Failed to create issue in {github.repository}: {e}") from e

    issue_url = result.stdout.strip()
    if not issue_url:
        raise PublishError(f"gh did not report the URL of the issue created in {github.repository}")
    logger.info("issue_created", repository=github.repository, url=issue_url)
    return issue_url
