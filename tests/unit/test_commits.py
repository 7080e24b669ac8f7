"""Tests for commit parsing and author filtering."""

from __future__ import annotations

import pytest

from release_changelog.config.models import ChangelogPolicy
from release_changelog.core.commits import (
    OTHER_TYPE,
    ParsedCommit,
    RawCommit,
    is_author_allowed,
    parse_commit,
)


class TestParseCommit:
    """Tests for parse_commit()."""

    def test_parse_simple_feat(self):
        """Parse a simple feat commit."""
        pc = parse_commit("feat: add new feature")

        assert pc.is_conventional
        assert pc.commit_type == "feat"
        assert pc.description == "add new feature"
        assert pc.pr_number is None
        assert not pc.is_breaking

    def test_scope_is_discarded_from_description(self):
        """Scope content never leaks into type or description."""
        pc = parse_commit("fix(api): handle null response")

        assert pc.commit_type == "fix"
        assert pc.scope == "api"
        assert pc.description == "handle null response"

    @pytest.mark.parametrize(
        "message",
        [
            "feat!: redesign API",
            "feat(core)!: redesign API",
        ],
    )
    def test_breaking_marker(self, message: str):
        """The ! marker is surfaced as is_breaking."""
        pc = parse_commit(message)

        assert pc.is_breaking
        assert pc.commit_type == "feat"
        assert pc.description == "redesign API"

    def test_type_is_lowercased(self):
        """Commit types are normalized to lowercase."""
        assert parse_commit("FEAT: shout").commit_type == "feat"

    def test_description_is_trimmed(self):
        """Surrounding whitespace is removed from the description."""
        assert parse_commit("fix:    spaced out   ").description == "spaced out"

    def test_only_first_line_is_used(self):
        """The body of the message is ignored."""
        pc = parse_commit("feat: first line\n\nfix: not this (#99)\nBREAKING CHANGE: nope")

        assert pc.commit_type == "feat"
        assert pc.description == "first line"
        assert pc.pr_number is None

    def test_non_conventional(self):
        """Messages without a prefix fall back to the other type."""
        pc = parse_commit("  Updated the readme file  \nmore text")

        assert not pc.is_conventional
        assert pc.commit_type == OTHER_TYPE
        assert pc.description == "Updated the readme file"

    def test_non_conventional_with_space_in_type(self):
        """A prefix with non-word characters is not conventional."""
        pc = parse_commit("Merge branch: main")

        assert pc.commit_type == OTHER_TYPE
        assert pc.description == "Merge branch: main"

    @pytest.mark.parametrize("message", ["Ünïcode: text", "fïx: text", "修正: text"])
    def test_non_ascii_type_is_not_conventional(self, message: str):
        """Only ASCII word characters form a commit type."""
        pc = parse_commit(message)

        assert pc.commit_type == OTHER_TYPE
        assert pc.description == message

    def test_non_ascii_description(self):
        """Descriptions may still contain any characters."""
        assert parse_commit("feat: añadir réglage").description == "añadir réglage"

    def test_empty_message(self):
        """Empty input still produces a ParsedCommit."""
        assert parse_commit("") == ParsedCommit(commit_type="other", description="")

    def test_pr_number_conventional(self):
        """PR back-reference is extracted from conventional commits."""
        pc = parse_commit("feat: add login (#123)")

        assert pc.pr_number == "123"
        assert pc.description == "add login (#123)"

    def test_pr_number_non_conventional(self):
        """PR back-reference is extracted even when the prefix does not match."""
        pc = parse_commit("Merge pull request (#42) from acme/branch")

        assert pc.commit_type == OTHER_TYPE
        assert pc.pr_number == "42"

    def test_hash_without_parentheses_is_not_a_pr(self):
        """Only the (#N) form counts as a pull request reference."""
        assert parse_commit("fix: see #12").pr_number is None


class TestRawCommit:
    """Tests for RawCommit.from_github()."""

    def test_from_github(self):
        """Extract message and identities from a compare API payload."""
        commit = RawCommit.from_github(
            {
                "sha": "deadbeef",
                "author": {"login": "alice"},
                "commit": {
                    "message": "feat: x",
                    "author": {"name": "Alice Doe", "email": "alice@example.com"},
                },
            }
        )

        assert commit.sha == "deadbeef"
        assert commit.message == "feat: x"
        assert commit.identities == ["alice", "Alice Doe", "alice@example.com"]

    def test_from_github_without_account(self):
        """A null GitHub account is tolerated."""
        commit = RawCommit.from_github(
            {"sha": "1", "author": None, "commit": {"message": "fix: y", "author": {"email": "x@y.z"}}}
        )

        assert commit.author_login is None
        assert commit.identities == ["x@y.z"]


class TestIsAuthorAllowed:
    """Tests for is_author_allowed()."""

    def test_no_authors_allows_all(self, make_commit):
        """Empty allow-list allows every commit."""
        policy = ChangelogPolicy()
        commit = make_commit("feat: x", login=None, name=None, email=None)

        assert is_author_allowed(commit, policy)

    def test_email_substring_match(self, make_commit):
        """Configured author matches part of the email."""
        policy = ChangelogPolicy(authors=["alice"])
        commit = make_commit("feat: x", login=None, name=None, email="alice@example.com")

        assert is_author_allowed(commit, policy)

    def test_other_author_rejected(self, make_commit):
        """Commit by an author not on the list is rejected."""
        policy = ChangelogPolicy(authors=["alice"])
        commit = make_commit("feat: x", login="bob", name=None, email=None)

        assert not is_author_allowed(commit, policy)

    def test_case_insensitive_and_trimmed(self, make_commit):
        """Matching ignores case and surrounding whitespace."""
        policy = ChangelogPolicy(authors=["  ALICE  "])
        commit = make_commit("feat: x", login=None, name="Alice Doe", email=None)

        assert is_author_allowed(commit, policy)

    def test_any_identity_field_matches(self, make_commit):
        """The login alone is enough to match."""
        policy = ChangelogPolicy(authors=["octo"])
        commit = make_commit("feat: x", login="octocat", name="Someone", email="s@example.com")

        assert is_author_allowed(commit, policy)

    def test_commit_without_identity_rejected(self, make_commit):
        """A commit with no identity fields cannot match a non-empty list."""
        policy = ChangelogPolicy(authors=["alice"])
        commit = make_commit("feat: x", login=None, name=None, email=None)

        assert not is_author_allowed(commit, policy)

    def test_blank_entries_are_ignored(self, make_commit):
        """A list of blank entries behaves like an empty list."""
        policy = ChangelogPolicy(authors=["", "   "])
        commit = make_commit("feat: x", login="bob")

        assert is_author_allowed(commit, policy)
