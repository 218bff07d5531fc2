"""The gh executor plugin.

Turns ``gh create issue <kind/name> [-n <namespace>]`` into a GitHub issue
carrying the resource logs and the cluster version.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ghexecutor import __version__
from ghexecutor.commands import parse_command
from ghexecutor.config import merge_configs
from ghexecutor.dependencies import DEPENDENCIES, Dependency, ensure_on_path
from ghexecutor.diagnostics import collect_issue_details
from ghexecutor.errors import RenderError
from ghexecutor.github import create_issue, issue_title
from ghexecutor.render import load_default_template, render_fallback_body, render_issue_body
from ghexecutor.utils.logging import get_logger

logger = get_logger(__name__)

PLUGIN_NAME = "gh"
DESCRIPTION = "GH creates an issue on GitHub for a related Kubernetes resource."
USAGE = f"Usage: {PLUGIN_NAME} create issue KIND/NAME"
SUCCESS_MESSAGE = "New issue created successfully! 🎉\n\nIssue URL: {url}"


@dataclass
class ExecuteInput:
    """A single command forwarded by the bot.

    Attributes:
        command: Raw command text, with or without the leading plugin name
        configs: Plugin configurations, lowest priority first
    """

    command: str
    configs: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ExecuteOutput:
    """Plain text answer sent back to the user."""

    data: str


@dataclass
class MetadataOutput:
    """Details about the plugin."""

    version: str
    description: str
    dependencies: Dict[str, Dependency] = field(default_factory=dict)


class GHExecutor:
    """Executor creating GitHub issues for Kubernetes resources.

    The executor keeps no state; concurrent ``execute`` calls are
    independent of each other.
    """

    name = PLUGIN_NAME

    async def metadata(self) -> MetadataOutput:
        """Return details about the plugin."""
        return MetadataOutput(
            version=__version__,
            description=DESCRIPTION,
            dependencies=DEPENDENCIES,
        )

    async def execute(self, execute_input: ExecuteInput) -> ExecuteOutput:
        """Handle one command.

        Args:
            execute_input: The command and the plugin configuration

        Returns:
            ExecuteOutput with the usage message, or the URL of the new issue

        Raises:
            ConfigError: If the configuration is invalid
            PublishError: If the issue could not be created
        """
        cmd = parse_command(PLUGIN_NAME, execute_input.command).create_issue
        if cmd is None:
            return ExecuteOutput(data=USAGE)

        config = merge_configs(execute_input.configs)
        ensure_on_path(config.bin_dir)

        timeout = config.command_timeout_seconds
        details = await collect_issue_details(
            cmd.namespace,
            cmd.type,
            tail_lines=config.logs_tail_lines,
            timeout=timeout,
            default_namespace=config.default_namespace,
        )

        template = config.github.issue_template or load_default_template()
        try:
            body = render_issue_body(template, details)
        except RenderError as e:
            logger.warning("template_render_failed", error=str(e))
            body = render_fallback_body(details)

        issue_url = await create_issue(config.github, issue_title(cmd.type), body, timeout=timeout)

        return ExecuteOutput(data=SUCCESS_MESSAGE.format(url=issue_url))


PLUGINS: Dict[str, GHExecutor] = {PLUGIN_NAME: GHExecutor()}
