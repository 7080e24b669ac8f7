"""Configuration management for release-changelog."""

from __future__ import annotations

from release_changelog.config.loader import load_policy, load_settings
from release_changelog.config.models import (
    DEFAULT_SECTION,
    ChangelogPolicy,
    ConfluenceSettings,
    GitHubSettings,
    Settings,
)

__all__ = [
    "DEFAULT_SECTION",
    "ChangelogPolicy",
    "ConfluenceSettings",
    "GitHubSettings",
    "Settings",
    "load_policy",
    "load_settings",
]
