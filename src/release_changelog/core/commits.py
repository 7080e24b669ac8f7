"""Conventional commit parsing and author filtering.

Commit messages are classified from their first line only. Anything that
does not follow the ``type(scope)!: description`` shape is kept under the
"other" type instead of being rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from release_changelog.config.models import ChangelogPolicy

OTHER_TYPE = "other"

# type(scope)!: description, with an ASCII-only type
CONVENTIONAL_PATTERN = re.compile(r"^(\w+)(?:\(([^)]+)\))?(!)?:\s*(.+)$", re.ASCII)

# GitHub squash-merge back-reference, e.g. "(#123)"
PR_REFERENCE_PATTERN = re.compile(r"\(#(\d+)\)")


@dataclass(frozen=True, slots=True)
class RawCommit:
    """A commit as returned by the version control host."""

    sha: str
    message: str
    author_login: str | None = None
    author_name: str | None = None
    author_email: str | None = None

    @classmethod
    def from_github(cls, payload: dict[str, Any]) -> RawCommit:
        """Build a commit from a GitHub compare API commit object.

        ``author`` is the linked GitHub account and may be null when the
        commit email is not associated with any account.
        """
        details = payload.get("commit") or {}
        git_author = details.get("author") or {}
        account = payload.get("author") or {}
        return cls(
            sha=payload.get("sha", ""),
            message=details.get("message") or "",
            author_login=account.get("login"),
            author_name=git_author.get("name"),
            author_email=git_author.get("email"),
        )

    @property
    def identities(self) -> list[str]:
        """Present author identity fields (login, name, email)."""
        return [v for v in (self.author_login, self.author_name, self.author_email) if v]


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    """Classification of a single commit message."""

    commit_type: str
    description: str
    pr_number: str | None = None
    scope: str | None = None
    is_breaking: bool = False

    @property
    def is_conventional(self) -> bool:
        return self.commit_type != OTHER_TYPE

    @classmethod
    def from_message(cls, message: str) -> ParsedCommit:
        """Parse the first line of a commit message.

        The pull request reference is extracted whether or not the line
        follows the conventional commit shape.
        """
        first_line = message.split("\n", 1)[0]

        pr_match = PR_REFERENCE_PATTERN.search(first_line)
        pr_number = pr_match.group(1) if pr_match else None

        match = CONVENTIONAL_PATTERN.match(first_line)
        if not match:
            return cls(
                commit_type=OTHER_TYPE,
                description=first_line.strip(),
                pr_number=pr_number,
            )

        commit_type, scope, breaking, description = match.groups()
        return cls(
            commit_type=commit_type.lower(),
            description=description.strip(),
            pr_number=pr_number,
            scope=scope,
            is_breaking=breaking is not None,
        )


def parse_commit(message: str) -> ParsedCommit:
    """Parse a commit message. Never raises."""
    return ParsedCommit.from_message(message)


def _normalize(value: str) -> str:
    return value.strip().lower()


def is_author_allowed(commit: RawCommit, policy: ChangelogPolicy) -> bool:
    """Check a commit against the policy's author allow-list.

    An allow-listed entry matches when it is a case-insensitive substring
    of the commit's login, name or email, so partial names and bare email
    domains work. An empty allow-list allows everyone.

    Args:
        commit: Commit to check
        policy: Changelog policy

    Returns:
        True if the commit should be included
    """
    allowed = [_normalize(a) for a in policy.authors if a and a.strip()]
    if not allowed:
        return True

    candidates = [_normalize(v) for v in commit.identities]
    return any(author in candidate for author in allowed for candidate in candidates)
