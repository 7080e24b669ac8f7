"""Changelog publishing targets."""

from __future__ import annotations

from release_changelog.publish.confluence import ConfluenceClient, ConfluencePage

__all__ = ["ConfluenceClient", "ConfluencePage"]
