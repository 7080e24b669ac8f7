"""Core business logic for release-changelog.

This module contains the pure building blocks:
- Conventional commit parsing and author filtering
- Changelog grouping and rendering (Markdown, HTML list or table)
- Previous tag resolution
"""

from __future__ import annotations

from release_changelog.core.changelog import (
    ChangelogDocument,
    ChangelogEntry,
    ListRendering,
    OutputFormat,
    Section,
    TableRendering,
    assemble_changelog,
    group_commits,
    render_html,
    render_markdown,
)
from release_changelog.core.commits import (
    ParsedCommit,
    RawCommit,
    is_author_allowed,
    parse_commit,
)
from release_changelog.core.results import Severity, StepOutcome
from release_changelog.core.tags import Tag, find_previous_tag

__all__ = [
    # Changelog
    "ChangelogDocument",
    "ChangelogEntry",
    "ListRendering",
    "OutputFormat",
    # Commits
    "ParsedCommit",
    "RawCommit",
    "Section",
    # Results
    "Severity",
    "StepOutcome",
    "TableRendering",
    # Tags
    "Tag",
    "assemble_changelog",
    "find_previous_tag",
    "group_commits",
    "is_author_allowed",
    "parse_commit",
    "render_html",
    "render_markdown",
]
