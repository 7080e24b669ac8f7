"""release-changelog: changelogs from GitHub tag ranges, published to Confluence."""

from __future__ import annotations

__version__ = "0.1.0"
