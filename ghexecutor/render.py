"""Issue body rendering.

Issue bodies are Jinja2 templates. The template sees the diagnostics as
``type``, ``namespace``, ``logs`` and ``version`` (and the whole
``issue``), plus a ``code`` helper that wraps text in a fenced block::

    Resource {{ type }} in {{ namespace }}
    {{ code("text", logs) }}
    {{ version | code("yaml") }}
"""

from dataclasses import asdict
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, TemplateError

from ghexecutor.diagnostics import IssueDetails
from ghexecutor.errors import RenderError

TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE_NAME = "default_issue.md"


def code(syntax: str, text: str) -> str:
    """Wrap text in a Markdown fenced code block tagged with ``syntax``."""
    return f"\n```{syntax}\n{text}\n```\n"


def _code_filter(text: str, syntax: str = "") -> str:
    return code(syntax, text)


def _build_environment() -> Environment:
    env = Environment(autoescape=False, keep_trailing_newline=True)
    env.globals["code"] = code
    env.filters["code"] = _code_filter
    return env


@lru_cache(maxsize=1)
def load_default_template() -> str:
    """Load the built-in issue body template shipped with the package."""
    return (TEMPLATES_DIR / DEFAULT_TEMPLATE_NAME).read_text(encoding="utf-8")


def render_issue_body(template: str, details: IssueDetails) -> str:
    """Render the issue body for the given diagnostics.

    Args:
        template: Jinja2 template source
        details: Collected diagnostics

    Returns:
        The rendered Markdown body

    Raises:
        RenderError: If the template cannot be parsed or rendered, e.g. it
            calls a helper that does not exist or with the wrong arguments
    """
    env = _build_environment()
    try:
        compiled = env.from_string(template)
        return compiled.render(issue=details, **asdict(details))
    except TemplateError as e:
        raise RenderError(f"Failed to render issue template: {e}") from e
    except Exception as e:
        # Raised while evaluating, e.g. code() called with one argument
        raise RenderError(f"Failed to render issue template: {type(e).__name__}: {e}") from e


def render_fallback_body(details: IssueDetails) -> str:
    """Render the built-in template, used when the configured one is broken."""
    return render_issue_body(load_default_template(), details)
