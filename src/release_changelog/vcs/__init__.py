"""Version control host integration."""

from __future__ import annotations

from release_changelog.vcs.github import GitHubClient

__all__ = ["GitHubClient"]
