"""Typer application for release-changelog."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from release_changelog import __version__
from release_changelog.cli.commands.generate import run_generate
from release_changelog.core.changelog import ListRendering, OutputFormat, TableRendering

console = Console()
err_console = Console(stderr=True)

USAGE = """\
[red]Usage:[/] release-changelog <tag> | <from> <to>

Examples:
  release-changelog v1.2.0              # Generate from previous tag to v1.2.0
  release-changelog v1.1.0 v1.2.0       # Generate from v1.1.0 to v1.2.0"""

app = typer.Typer(
    name="release-changelog",
    help="Generate a changelog between two tags and optionally publish it to Confluence.",
    add_completion=False,
    no_args_is_help=False,
)


class Layout(str, Enum):
    """HTML section layout."""

    LIST = "list"
    TABLE = "table"


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("release_changelog")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-changelog {__version__}")
        raise typer.Exit()


@app.command()
def main(
    first: Annotated[
        str | None,
        typer.Argument(help="Release tag, or the start of the range when a second tag is given."),
    ] = None,
    second: Annotated[str | None, typer.Argument(help="End of the range.")] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format of the changelog file."),
    ] = OutputFormat.HTML,
    layout: Annotated[
        Layout,
        typer.Option("--layout", help="HTML section layout."),
    ] = Layout.TABLE,
    config_path: Annotated[
        Path,
        typer.Option("--config", "-c", help="Path to the JSON policy file."),
    ] = Path("config.json"),
    output_path: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: CHANGELOG.html or CHANGELOG.md)."),
    ] = None,
    env_file: Annotated[
        Path,
        typer.Option("--env-file", help="Dotenv file with credentials."),
    ] = Path(".env"),
    publish: Annotated[
        bool,
        typer.Option("--publish/--no-publish", help="Update Confluence when CONFLUENCE_PAGE_ID is set."),
    ] = True,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version."),
    ] = False,
) -> None:
    """Generate the changelog for a release."""
    _configure_logging(verbose)

    if not first:
        err_console.print(USAGE)
        raise typer.Exit(1)

    rendering = TableRendering() if layout is Layout.TABLE else ListRendering()

    result = run_generate(
        first,
        second,
        output_format=output_format,
        rendering=rendering,
        config_path=config_path,
        output_path=output_path,
        env_file=env_file,
        publish=publish,
        console=console,
        err_console=err_console,
    )

    if result.failed:
        raise typer.Exit(1)
