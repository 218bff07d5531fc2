"""
Command-line interface for gh-executor.

The bot launches this entry point as a sub-process plugin; it can also be
used by hand to try a command against a cluster.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from ghexecutor import __version__
from ghexecutor.config import load_config
from ghexecutor.dependencies import DEPENDENCIES, download_dependencies
from ghexecutor.errors import GHExecutorError
from ghexecutor.executor import PLUGIN_NAME, PLUGINS, ExecuteInput
from ghexecutor.utils.logging import configure_logging

app = typer.Typer(
    name="gh-executor",
    help="Create GitHub issues for malfunctioning Kubernetes resources",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _load_config_files(paths: List[Path]) -> List[Dict[str, Any]]:
    configs = []
    for path in paths:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            err_console.print(f"[red]Error reading config file {path}: {e}[/red]")
            raise typer.Exit(1)
        configs.append(data)
    return configs


@app.command()
def version() -> None:
    """Display the version of gh-executor."""
    typer.echo(f"gh-executor version {__version__}")


@app.command()
def execute(
    command: str = typer.Argument(..., help="Command text, e.g. 'create issue pod/nginx -n web'"),
    config: Optional[List[Path]] = typer.Option(
        None, "--config", "-c", help="Plugin configuration YAML file (repeatable, later files win)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every external command to stderr"),
) -> None:
    """Run a single plugin command and print the response."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    configs = _load_config_files(config or [])

    try:
        output = asyncio.run(PLUGINS[PLUGIN_NAME].execute(ExecuteInput(command=command, configs=configs)))
    except GHExecutorError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    typer.echo(output.data)


@app.command()
def metadata() -> None:
    """Show plugin details and pinned dependencies."""
    info = asyncio.run(PLUGINS[PLUGIN_NAME].metadata())
    console.print(f"[bold]{PLUGIN_NAME}[/bold] {info.version}")
    console.print(info.description)
    console.print(f"Dependencies: {', '.join(info.dependencies)}")

    table = Table(title="Dependencies")
    table.add_column("Tool", style="magenta")
    table.add_column("Platform", style="cyan")
    table.add_column("URL", style="green")
    for name, dependency in info.dependencies.items():
        for platform_key, url in dependency.urls.items():
            table.add_row(name, platform_key, url)
    console.print(table)


@app.command("install-deps")
def install_deps(
    bin_dir: Optional[str] = typer.Option(None, "--bin-dir", help="Install directory (defaults to configured bin_dir)"),
    platform_key: Optional[str] = typer.Option(None, "--platform", help="Platform key such as linux/amd64"),
) -> None:
    """Download kubectl and gh for this platform."""
    configure_logging(logging.INFO)
    target = bin_dir or load_config().bin_dir
    try:
        downloaded = download_dependencies(DEPENDENCIES, target, platform_key=platform_key)
    except GHExecutorError as e:
        err_console.print(f"[red]Error installing dependencies: {e}[/red]")
        raise typer.Exit(1)

    if downloaded:
        console.print(f"[green]Installed {', '.join(downloaded)} into {target}[/green]")
    else:
        console.print(f"[yellow]All dependencies already present in {target}[/yellow]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
