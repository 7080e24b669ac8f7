"""Command line interface for release-changelog."""
