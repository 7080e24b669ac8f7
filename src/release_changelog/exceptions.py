"""Exception hierarchy for release-changelog.

All errors raised by the package derive from ReleaseChangelogError so the
CLI can report them uniformly. Only PublishError (and its subclasses) is
treated as non-fatal: the local changelog file is the primary deliverable.
"""

from __future__ import annotations


class ReleaseChangelogError(Exception):
    """Base exception for all release-changelog errors."""

    fatal: bool = True

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleaseChangelogError):
    """Policy file or runtime settings are missing or malformed."""


# =============================================================================
# Tag resolution
# =============================================================================


class TagResolutionError(ReleaseChangelogError):
    """Base class for previous-tag lookup failures."""


class TagNotFoundError(TagResolutionError):
    """The requested tag is not part of the tag listing."""

    def __init__(self, message: str, tag: str | None = None) -> None:
        self.tag = tag
        super().__init__(message)


class NoPreviousTagError(TagResolutionError):
    """The requested tag is the oldest tag in the listing."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f'No previous tag found before "{tag}". This is the oldest tag.')


# =============================================================================
# GitHub
# =============================================================================


class GitHubError(ReleaseChangelogError):
    """A request to the GitHub API failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RangeFetchError(GitHubError):
    """Comparing two refs failed (unknown ref, auth failure, access denied)."""


class TagListError(GitHubError):
    """Listing the repository tags failed."""


# =============================================================================
# Output
# =============================================================================


class WriteError(ReleaseChangelogError):
    """Writing the changelog file failed."""


class PublishError(ReleaseChangelogError):
    """Updating the Confluence page failed. Never aborts a run."""

    fatal = False

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class VersionConflictError(PublishError):
    """The wiki page was modified concurrently; re-running usually fixes it."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "Confluence page was modified by another user. Please try again.",
            status_code=409,
        )
