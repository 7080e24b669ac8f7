"""Changelog assembly and rendering.

Commits are filtered, classified and grouped into sections in the order
each section is first populated, then rendered as Markdown or as HTML
suitable for the Confluence storage format.

HTML sections have two layouts, selected with a rendering strategy:

- ListRendering: a heading followed by a bullet list
- TableRendering: a fixed three-column table whose first column holds
  the bullet list
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from html import escape
from typing import TYPE_CHECKING

from release_changelog.core.commits import is_author_allowed, parse_commit

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_changelog.config.models import ChangelogPolicy
    from release_changelog.core.commits import RawCommit

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Changelog output format."""

    HTML = "html"
    MARKDOWN = "markdown"

    @property
    def default_filename(self) -> str:
        return "CHANGELOG.html" if self is OutputFormat.HTML else "CHANGELOG.md"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ListRendering:
    """Render each HTML section as a heading and a bullet list."""

    heading_level: int = 3


@dataclass(frozen=True)
class TableRendering:
    """Render each HTML section as a three-column table.

    The first column holds the section's items, the second is left empty
    for a hand-written description and the third holds a link placeholder.
    """

    description_header: str = "Description"
    links_header: str = "Links"
    link_placeholder: str = "Link to doc here"
    column_widths: tuple[int, int, int] = (50, 35, 15)


Rendering = ListRendering | TableRendering


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    """A single line item of a section."""

    description: str
    pr_number: str | None = None
    is_breaking: bool = False


@dataclass
class Section:
    """A titled group of changelog entries."""

    title: str
    entries: list[ChangelogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ChangelogDocument:
    """A rendered changelog for a single release."""

    version: str
    output_format: OutputFormat
    sections: tuple[Section, ...]
    text: str

    @property
    def is_empty(self) -> bool:
        """True when no commit survived filtering."""
        return not self.sections

    @property
    def entry_count(self) -> int:
        return sum(len(s.entries) for s in self.sections)

    def __str__(self) -> str:
        return self.text


def group_commits(commits: Iterable[RawCommit], policy: ChangelogPolicy) -> list[Section]:
    """Filter, classify and group commits into sections.

    Commits are processed in the given order. Sections appear in the order
    they are first populated, independent of the order of ``policy.types``.

    Args:
        commits: Commits in caller-determined order
        policy: Changelog policy

    Returns:
        Non-empty sections in first-seen order
    """
    sections: dict[str, Section] = {}

    for commit in commits:
        if not is_author_allowed(commit, policy):
            logger.debug("Skipping %s: author not allowed", commit.sha[:7])
            continue

        parsed = parse_commit(commit.message)
        if policy.is_ignored(parsed.commit_type):
            logger.debug("Skipping %s: type %r is ignored", commit.sha[:7], parsed.commit_type)
            continue

        title = policy.section_for(parsed.commit_type)
        section = sections.get(title)
        if section is None:
            section = sections[title] = Section(title)
        section.entries.append(
            ChangelogEntry(
                description=parsed.description,
                pr_number=parsed.pr_number,
                is_breaking=parsed.is_breaking,
            )
        )

    return list(sections.values())


def _pull_url(repository_url: str, pr_number: str) -> str:
    return f"{repository_url.rstrip('/')}/pull/{pr_number}"


# =============================================================================
# Markdown
# =============================================================================


def _markdown_item(entry: ChangelogEntry, repository_url: str | None) -> str:
    line = f"- {entry.description}"
    if entry.pr_number:
        if repository_url:
            line += f" ([#{entry.pr_number}]({_pull_url(repository_url, entry.pr_number)}))"
        else:
            line += f" (#{entry.pr_number})"
    return line


def render_markdown(
    version: str,
    sections: Iterable[Section],
    repository_url: str | None = None,
) -> str:
    """Render sections as Markdown.

    The version is a level-1 heading, each section a level-2 heading
    followed by a bullet list. Blocks are separated by a blank line.
    """
    blocks = [f"# {version}"]
    for section in sections:
        items = "\n".join(_markdown_item(e, repository_url) for e in section.entries)
        blocks.append(f"## {section.title}\n\n{items}")
    return "\n\n".join(blocks) + "\n"


# =============================================================================
# HTML
# =============================================================================


def _html_item(entry: ChangelogEntry, repository_url: str | None) -> str:
    link = ""
    if entry.pr_number:
        if repository_url:
            href = escape(_pull_url(repository_url, entry.pr_number))
            link = f' (<a href="{href}">#{entry.pr_number}</a>)'
        else:
            link = f" (#{entry.pr_number})"
    return f"<li>{escape(entry.description)}{link}</li>"


def _html_list(section: Section, repository_url: str | None) -> str:
    return "<ul>" + "".join(_html_item(e, repository_url) for e in section.entries) + "</ul>"


def _render_list_section(
    section: Section, repository_url: str | None, rendering: ListRendering
) -> str:
    tag = f"h{rendering.heading_level}"
    return f"<{tag}>{escape(section.title)}</{tag}>{_html_list(section, repository_url)}"


def _render_table_section(
    section: Section, repository_url: str | None, rendering: TableRendering
) -> str:
    cols = "".join(f'<col style="width: {w}%">' for w in rendering.column_widths)
    return (
        '<table style="width: 100%; table-layout: fixed;">'
        f"<colgroup>{cols}</colgroup>"
        "<tbody>"
        "<tr>"
        f"<th>{escape(section.title)}</th>"
        f"<th>{escape(rendering.description_header)}</th>"
        f"<th>{escape(rendering.links_header)}</th>"
        "</tr>"
        "<tr>"
        f"<td>{_html_list(section, repository_url)}</td>"
        "<td></td>"
        f"<td><ul><li>{escape(rendering.link_placeholder)}</li></ul></td>"
        "</tr>"
        "</tbody>"
        "</table>"
    )


def render_html(
    version: str,
    sections: Iterable[Section],
    repository_url: str | None = None,
    rendering: Rendering | None = None,
) -> str:
    """Render sections as HTML.

    The version is an ``<h2>`` heading; sections follow using the given
    rendering strategy (ListRendering when omitted).
    """
    rendering = rendering or ListRendering()
    parts = [f"<h2>{escape(version)}</h2>"]
    for section in sections:
        if isinstance(rendering, TableRendering):
            parts.append(_render_table_section(section, repository_url, rendering))
        else:
            parts.append(_render_list_section(section, repository_url, rendering))
    return "".join(parts)


def assemble_changelog(
    commits: Iterable[RawCommit],
    policy: ChangelogPolicy,
    version: str,
    *,
    output_format: OutputFormat = OutputFormat.MARKDOWN,
    rendering: Rendering | None = None,
    repository_url: str | None = None,
) -> ChangelogDocument:
    """Build the changelog document for a release.

    Args:
        commits: Commits of the release range, in order
        policy: Changelog policy
        version: Release label used as the document heading
        output_format: Markdown or HTML
        rendering: HTML section layout (ignored for Markdown)
        repository_url: Repository web URL for pull request links

    Returns:
        The rendered ChangelogDocument
    """
    sections = tuple(group_commits(commits, policy))

    if output_format is OutputFormat.HTML:
        text = render_html(version, sections, repository_url, rendering)
    else:
        text = render_markdown(version, sections, repository_url)

    return ChangelogDocument(
        version=version,
        output_format=output_format,
        sections=sections,
        text=text,
    )
