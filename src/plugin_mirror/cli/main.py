"""CLI entry point for plugin-mirror.

Invoked as::

    plugin-mirror [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m plugin_mirror.cli.main

Commands
--------
- ``sync``     Mirror every configured project into its svn repository.
- ``list``     Show the projects defined in the configuration file.
- ``version``  Show version information.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from plugin_mirror import __version__

if TYPE_CHECKING:
    from plugin_mirror.config.loader import MirrorConfig

console = Console()
err_console = Console(stderr=True)

_WARNING_MESSAGES = {
    "skipped_mirror_fetch_failed": "Couldn't fetch git repo for {name}, skipping updates...",
    "skipped_dist_checkout_failed": "Couldn't fetch svn repo for {name}, skipping updates...",
    "skipped_commit_failed": (
        "There was an issue committing {name} to the distribution repository, "
        "skipping updates..."
    ),
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
    )


def _load(root: Path, config_path: Path | None) -> MirrorConfig:
    """Load the configuration or exit with status 1."""
    from plugin_mirror.config.loader import DEFAULT_CONFIG_NAME, ConfigError, load_config

    path = config_path if config_path is not None else root / DEFAULT_CONFIG_NAME
    try:
        return load_config(path)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


root_option = click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=Path("."),
    envvar="PLUGIN_MIRROR_ROOT",
    show_default=True,
    help="Storage root holding git/, svn/ and config.yml.",
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar="PLUGIN_MIRROR_CONFIG",
    help="Configuration file. Default: <root>/config.yml.",
)


@click.group()
@click.version_option(version=__version__, prog_name="plugin-mirror")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log every external command and its status.",
)
def cli(verbose: bool) -> None:
    """Mirror git-hosted plugins into Subversion distribution repositories"""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    console.print(f"[bold]plugin-mirror[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@cli.command(name="list")
@root_option
@config_option
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output results as JSON.",
)
def list_command(root: Path, config_path: Path | None, json_output: bool) -> None:
    """List the projects defined in the configuration file."""
    config = _load(root, config_path)

    if json_output:
        output = [
            {
                "name": spec.name,
                "origin_url": spec.origin_url,
                "origin_branch": spec.origin_branch,
                "dist_url": spec.dist_url,
            }
            for spec in config.projects.values()
        ]
        console.print_json(json.dumps(output, indent=2))
        return

    if not config.projects:
        console.print("[dim]No projects configured.[/dim]")
        return

    table = Table(title="Configured Projects", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Git origin")
    table.add_column("Branch", style="yellow")
    table.add_column("Svn repository")
    for spec in config.projects.values():
        table.add_row(
            escape(spec.name),
            escape(spec.origin_url),
            escape(spec.origin_branch) or "[dim]default[/dim]",
            escape(spec.dist_url),
        )
    console.print(table)


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------


@cli.command(name="sync")
@root_option
@config_option
@click.option(
    "--only",
    "-o",
    multiple=True,
    help="Synchronize only this project. Repeatable.",
)
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-command timeout in seconds. Default: wait indefinitely.",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit with status 1 if any project was skipped.",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output the run summary as JSON.",
)
def sync_command(
    root: Path,
    config_path: Path | None,
    only: tuple[str, ...],
    timeout: float | None,
    strict: bool,
    json_output: bool,
) -> None:
    """Mirror each configured project from git into its svn repository.

    Examples:

    \b
        plugin-mirror sync
        plugin-mirror sync --root /srv/mirror --only my-plugin
        plugin-mirror -v sync --timeout 600 --strict
    """
    from plugin_mirror.process.runner import ProcessRunner
    from plugin_mirror.sync.models import ProjectResult
    from plugin_mirror.sync.orchestrator import SyncOrchestrator

    config = _load(root, config_path)

    projects = config.projects
    if only:
        unknown = [name for name in only if name not in projects]
        if unknown:
            console.print(
                f"[red]Error:[/red] Unknown project(s): {escape(', '.join(unknown))}"
            )
            sys.exit(1)
        projects = {name: spec for name, spec in projects.items() if name in only}

    def report(result: ProjectResult) -> None:
        if json_output:
            return
        name = escape(result.name)
        if result.succeeded:
            release = f" (release {escape(result.release)})" if result.release else ""
            console.print(f"[green]Success:[/green] {name} has been updated.{release}")
        else:
            message = _WARNING_MESSAGES[result.outcome.value].format(name=name)
            console.print(f"[yellow]Warning:[/yellow] {message}")

    orchestrator = SyncOrchestrator(
        root,
        runner=ProcessRunner(timeout=timeout),
        tools=config.tools,
    )
    summary = orchestrator.sync_all(projects, on_result=report)

    if json_output:
        console.print_json(json.dumps(summary.to_dict(), indent=2))
    elif summary.results:
        console.print(
            f"\n[bold]{summary.succeeded}[/bold] updated, "
            f"[bold]{summary.skipped}[/bold] skipped."
        )
    else:
        console.print("[dim]No projects configured.[/dim]")

    if strict and not summary.all_succeeded:
        sys.exit(1)


if __name__ == "__main__":
    cli()
