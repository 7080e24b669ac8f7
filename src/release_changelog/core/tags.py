"""Previous tag resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from release_changelog.exceptions import NoPreviousTagError, TagNotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

# Number of tags listed in the "not found" message
AVAILABLE_TAGS_PREVIEW = 5


@dataclass(frozen=True, slots=True)
class Tag:
    """A named pointer to a commit."""

    name: str
    sha: str | None = None

    @classmethod
    def from_github(cls, payload: dict[str, Any]) -> Tag:
        return cls(name=payload["name"], sha=(payload.get("commit") or {}).get("sha"))


def find_previous_tag(tags: Sequence[Tag], current: str) -> str:
    """Find the tag preceding ``current`` in a most-recent-first listing.

    Matching is exact and purely positional; no version ordering is
    applied.

    Args:
        tags: Tags in host order, most recent first
        current: Name of the release tag

    Returns:
        Name of the entry following ``current`` in ``tags``

    Raises:
        TagNotFoundError: If ``tags`` is empty or does not contain ``current``
        NoPreviousTagError: If ``current`` is the last (oldest) entry
    """
    if not tags:
        raise TagNotFoundError("No tags found in repository", tag=current)

    index = next((i for i, tag in enumerate(tags) if tag.name == current), None)
    if index is None:
        available = ", ".join(t.name for t in tags[:AVAILABLE_TAGS_PREVIEW])
        more = "..." if len(tags) > AVAILABLE_TAGS_PREVIEW else ""
        raise TagNotFoundError(
            f'Tag "{current}" not found. Available tags: {available}{more}',
            tag=current,
        )

    if index + 1 >= len(tags):
        raise NoPreviousTagError(current)

    return tags[index + 1].name
