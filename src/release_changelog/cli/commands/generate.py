"""Implementation of the changelog generation command.

Coordinates the run: resolve the tag range, fetch the commits, assemble
the changelog, write it to disk and optionally prepend it to the
Confluence page. Each step records a StepOutcome; a fatal outcome stops
the run, a warning (failed wiki update) does not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from release_changelog.config import load_policy, load_settings
from release_changelog.core.changelog import OutputFormat, assemble_changelog, render_html
from release_changelog.core.results import Severity, StepOutcome
from release_changelog.core.tags import find_previous_tag
from release_changelog.exceptions import PublishError, ReleaseChangelogError, WriteError
from release_changelog.publish.confluence import ConfluenceClient
from release_changelog.vcs.github import GitHubClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from release_changelog.config.models import ConfluenceSettings, GitHubSettings, Settings
    from release_changelog.core.changelog import ChangelogDocument, Rendering

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """Everything a run produced."""

    outcomes: list[StepOutcome] = field(default_factory=list)
    document: ChangelogDocument | None = None
    output_path: Path | None = None

    @property
    def failed(self) -> bool:
        return any(o.is_fatal for o in self.outcomes)

    @property
    def warnings(self) -> list[StepOutcome]:
        return [o for o in self.outcomes if o.severity is Severity.WARNING]


def resolve_range(
    first: str,
    second: str | None,
    github: GitHubClient,
    console: Console,
) -> tuple[str, str]:
    """Determine the (from_tag, to_tag) pair.

    With two arguments the range is taken as given. With one, the argument
    is the release tag and the previous tag is looked up in the tag list.
    """
    if second:
        console.print(f"Generating changelog from [cyan]{escape(first)}[/] to [cyan]{escape(second)}[/]...")
        return first, second

    console.print(f"Finding previous tag for [cyan]{escape(first)}[/]...")
    tags = github.list_tags()
    from_tag = find_previous_tag(tags, first)
    console.print(f"  [green]✓[/] Previous tag found: [cyan]{escape(from_tag)}[/]")
    return from_tag, first


def write_changelog(document: ChangelogDocument, path: Path) -> Path:
    """Write the rendered changelog, replacing any previous file.

    Raises:
        WriteError: If the file cannot be written
    """
    try:
        path.write_text(document.text, encoding="utf-8")
    except OSError as e:
        raise WriteError(f"Failed to write {path}: {e}") from e
    return path


def publish_changelog(
    html: str,
    settings: Settings,
    confluence_factory: Callable[[ConfluenceSettings], ConfluenceClient],
) -> StepOutcome:
    """Prepend the changelog to the configured Confluence page.

    Publishing never fails the run; problems are reported as a warning
    outcome.
    """
    try:
        with confluence_factory(settings.confluence) as confluence:
            page = confluence.prepend_to_page(html)
    except PublishError as e:
        logger.debug("Confluence update failed", exc_info=True)
        return StepOutcome.warning("publish", f"Confluence update failed: {e.message}")
    return StepOutcome.ok("publish", f"Confluence page updated (version {page.version})")


def run_generate(
    first: str,
    second: str | None,
    *,
    output_format: OutputFormat,
    rendering: Rendering,
    config_path: Path,
    output_path: Path | None,
    env_file: Path | None,
    publish: bool,
    console: Console,
    err_console: Console,
    github_factory: Callable[[GitHubSettings], GitHubClient] | None = None,
    confluence_factory: Callable[[ConfluenceSettings], ConfluenceClient] | None = None,
) -> GenerateResult:
    """Run the generate command.

    Args:
        first: Release tag, or the start of the range when ``second`` is given
        second: Optional end of the range
        output_format: Format of the written file
        rendering: HTML section layout
        config_path: Path to the JSON policy
        output_path: Output file; defaults to CHANGELOG.html / CHANGELOG.md
        env_file: Optional dotenv file with credentials
        publish: Whether to update Confluence when it is configured
        console: Console for standard output
        err_console: Console for error output
        github_factory: Builds the GitHub client (injectable for tests)
        confluence_factory: Builds the Confluence client (injectable for tests)

    Returns:
        GenerateResult whose ``failed`` flag decides the exit code
    """
    github_factory = github_factory or GitHubClient
    confluence_factory = confluence_factory or ConfluenceClient
    result = GenerateResult()
    step = "config"

    try:
        settings = load_settings(env_file)
        github_settings = settings.github
        policy = load_policy(config_path)

        with github_factory(github_settings) as github:
            step = "resolve"
            from_tag, to_tag = resolve_range(first, second, github, console)

            step = "fetch"
            console.print(f"Fetching commits between [cyan]{escape(from_tag)}[/] and [cyan]{escape(to_tag)}[/]...")
            commits = github.compare_commits(from_tag, to_tag)

        if commits:
            console.print(f"  [green]✓[/] Found {len(commits)} commits")
        else:
            message = f"No commits found between {from_tag} and {to_tag}"
            err_console.print(f"[yellow]Warning:[/] {escape(message)}")
            result.outcomes.append(StepOutcome.warning("fetch", message))

        step = "assemble"
        document = assemble_changelog(
            commits,
            policy,
            to_tag,
            output_format=output_format,
            rendering=rendering,
            repository_url=github_settings.repository_url,
        )
        result.document = document
        if document.is_empty and commits:
            message = "All commits were filtered out; the changelog only contains the version heading"
            err_console.print(f"[yellow]Warning:[/] {message}")
            result.outcomes.append(StepOutcome.warning("assemble", message))

        step = "write"
        path = output_path or Path(output_format.default_filename)
        result.output_path = write_changelog(document, path)
        console.print(f"  [green]✓[/] {escape(str(path))} generated successfully")
        result.outcomes.append(StepOutcome.ok("write", f"Wrote {path}"))

    except ReleaseChangelogError as e:
        logger.debug("Step %r failed", step, exc_info=True)
        err_console.print(f"[red]Error:[/] {escape(e.message)}")
        result.outcomes.append(StepOutcome.fatal(step, e.message))
        return result

    if not publish or not settings.publishing_enabled:
        logger.debug("Confluence publishing skipped")
        return result

    console.print("Updating Confluence page...")
    if document.output_format is OutputFormat.HTML:
        html = document.text
    else:
        html = render_html(
            document.version,
            document.sections,
            github_settings.repository_url,
            rendering,
        )

    outcome = publish_changelog(html, settings, confluence_factory)
    result.outcomes.append(outcome)
    if outcome.severity is Severity.WARNING:
        err_console.print(f"[yellow]Warning:[/] {escape(outcome.message)}")
        err_console.print(f"The changelog was still saved to {escape(str(result.output_path))}")
    else:
        console.print(f"  [green]✓[/] {escape(outcome.message)}")

    return result
