"""Parser for commands sent to the gh plugin.

The bot forwards everything the user typed after the plugin name, e.g.::

    gh create issue pod/nginx -n web

Only ``create issue`` is supported. Input that does not match yields a
``Commands`` value without the ``create.issue`` branch, which callers
answer with the usage message.
"""

import shlex
from dataclasses import dataclass
from typing import List, Optional

NAMESPACE_FLAGS = {"-n", "--namespace"}


@dataclass
class CreateIssueCommand:
    """Arguments of ``create issue``.

    Attributes:
        type: Resource identifier as typed by the user, e.g. "pod/nginx"
        namespace: Value of -n/--namespace, empty when not given
    """

    type: str
    namespace: str = ""


@dataclass
class CreateCommand:
    """The ``create`` verb."""

    issue: Optional[CreateIssueCommand] = None


@dataclass
class Commands:
    """All supported plugin commands."""

    create: Optional[CreateCommand] = None

    @property
    def create_issue(self) -> Optional[CreateIssueCommand]:
        """Shortcut for ``create.issue``; None when there is nothing to do."""
        if self.create is None:
            return None
        return self.create.issue


def _parse_create_issue(args: List[str]) -> Optional[CreateIssueCommand]:
    positionals = []
    namespace = ""
    i = 0

    while i < len(args):
        token = args[i]

        if token in NAMESPACE_FLAGS:
            if i + 1 >= len(args):
                return None
            namespace = args[i + 1]
            i += 2
            continue

        if token.startswith("--namespace="):
            namespace = token.split("=", 1)[1]
            i += 1
            continue

        if token.startswith("-"):
            # Unknown flag
            return None

        positionals.append(token)
        i += 1

    if len(positionals) != 1:
        return None

    return CreateIssueCommand(type=positionals[0], namespace=namespace)


def parse_command(plugin_name: str, command: str) -> Commands:
    """
    Parse a raw command string into structured format

    Args:
        plugin_name: Name the plugin is registered under; stripped if it
            is the first word
        command: The command as typed by the user

    Returns:
        Commands with ``create.issue`` set only for a well-formed
        ``create issue <type> [-n <namespace>]``
    """
    try:
        tokens = shlex.split(command or "")
    except ValueError:
        # Unbalanced quotes
        return Commands()

    if tokens and tokens[0] == plugin_name:
        tokens = tokens[1:]

    if not tokens or tokens[0] != "create":
        return Commands()

    commands = Commands(create=CreateCommand())
    if len(tokens) < 2 or tokens[1] != "issue":
        return commands

    commands.create.issue = _parse_create_issue(tokens[2:])
    return commands
