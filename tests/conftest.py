"""Shared fixtures for the release-changelog test suite."""

from __future__ import annotations

import pytest

from release_changelog.config.models import (
    CONFLUENCE_REQUIRED_SETTINGS,
    GITHUB_REQUIRED_SETTINGS,
    ChangelogPolicy,
    GitHubSettings,
)
from release_changelog.core.commits import RawCommit
from release_changelog.core.tags import Tag

ALL_SETTINGS = (
    *GITHUB_REQUIRED_SETTINGS,
    *CONFLUENCE_REQUIRED_SETTINGS,
    "GITHUB_API_URL",
    "GITHUB_SERVER_URL",
)


def _make_commit(
    message: str,
    sha: str = "abc1234",
    login: str | None = "octocat",
    name: str | None = "Octo Cat",
    email: str | None = "octocat@example.com",
) -> RawCommit:
    return RawCommit(
        sha=sha,
        message=message,
        author_login=login,
        author_name=name,
        author_email=email,
    )


@pytest.fixture
def make_commit():
    """Factory for RawCommit instances with a default author."""
    return _make_commit


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every setting from the process environment."""
    for name in ALL_SETTINGS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def github_env(clean_env: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with the required GitHub settings."""
    clean_env.setenv("GITHUB_TOKEN", "ghp_test")
    clean_env.setenv("GITHUB_OWNER", "acme")
    clean_env.setenv("GITHUB_REPO", "rocket")
    return clean_env


@pytest.fixture
def github_settings() -> GitHubSettings:
    return GitHubSettings(token="ghp_test", owner="acme", repo="rocket")


@pytest.fixture
def policy() -> ChangelogPolicy:
    return ChangelogPolicy(
        types={"feat": "Features", "fix": "Fixes"},
        ignore_types=["chore"],
    )


@pytest.fixture
def sample_commits() -> list[RawCommit]:
    return [
        _make_commit("feat: add login (#10)", sha="a000001"),
        _make_commit("chore: bump deps", sha="a000002"),
        _make_commit("fix: null pointer", sha="a000003"),
    ]


@pytest.fixture
def tags() -> list[Tag]:
    return [Tag("v3"), Tag("v2"), Tag("v1")]
