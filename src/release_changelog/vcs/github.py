"""GitHub REST API client.

Only the two operations needed to build a changelog are implemented:
comparing two refs and listing the repository tags.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from release_changelog.core.commits import RawCommit
from release_changelog.core.tags import Tag
from release_changelog.exceptions import RangeFetchError, TagListError

if TYPE_CHECKING:
    from types import TracebackType

    from release_changelog.config.models import GitHubSettings

logger = logging.getLogger(__name__)

TAGS_PER_PAGE = 100
DEFAULT_TIMEOUT = 30.0

_AUTH_FAILED = "Authentication failed. Please check your GITHUB_TOKEN has 'repo' or 'public_repo' scope."
_FORBIDDEN = "Access forbidden. Your token may not have permission to access this repository."


class GitHubClient:
    """Minimal synchronous GitHub client.

    Usable as a context manager; the underlying HTTP client is closed on
    exit.
    """

    def __init__(
        self,
        settings: GitHubSettings,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._client = httpx.Client(
            base_url=settings.api_url.rstrip("/"),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {settings.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.settings.owner}/{self.settings.repo}"

    def _get(self, path: str, **params: Any) -> Any:
        logger.debug("GET %s %s", path, params or "")
        response = self._client.get(path, params=params or None)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise httpx.DecodingError(f"Invalid JSON from {path}: {e}", request=response.request) from e

    def compare_commits(self, base: str, head: str) -> list[RawCommit]:
        """Get the commits reachable from ``head`` but not from ``base``.

        Args:
            base: Older ref (tag, branch or SHA)
            head: Newer ref

        Returns:
            Commits in chronological order as returned by GitHub

        Raises:
            RangeFetchError: If the comparison fails
        """
        try:
            data = self._get(f"{self._repo_path}/compare/{base}...{head}")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                message = f"Tag not found: {base} or {head}. Please verify the tag names."
            elif status == 401:
                message = _AUTH_FAILED
            elif status == 403:
                message = _FORBIDDEN
            else:
                message = f"Failed to get commits: {e}"
            raise RangeFetchError(message, status_code=status) from e
        except httpx.HTTPError as e:
            raise RangeFetchError(f"Failed to get commits: {e}") from e

        payloads = (data.get("commits") or []) if isinstance(data, dict) else None
        unexpected = f"Failed to get commits: unexpected compare response for {base}...{head}"
        if not isinstance(payloads, list):
            raise RangeFetchError(unexpected)
        try:
            commits = [RawCommit.from_github(c) for c in payloads]
        except AttributeError as e:
            raise RangeFetchError(unexpected) from e
        logger.debug("Compared %s...%s: %d commits", base, head, len(commits))
        return commits

    def list_tags(self) -> list[Tag]:
        """List all repository tags, most recent first.

        Pages are requested sequentially until GitHub returns an empty
        page.

        Raises:
            TagListError: If any page request fails
        """
        tags: list[Tag] = []
        page = 1

        try:
            while True:
                data = self._get(f"{self._repo_path}/tags", per_page=TAGS_PER_PAGE, page=page)
                if not isinstance(data, list):
                    raise TagListError(f"Failed to list tags: unexpected response for page {page}")
                if not data:
                    break
                try:
                    tags.extend(Tag.from_github(t) for t in data)
                except (AttributeError, KeyError, TypeError) as e:
                    raise TagListError(f"Failed to list tags: malformed tag on page {page}") from e
                page += 1
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                message = (
                    f"Repository not found: {self.settings.full_name}. "
                    "Please verify GITHUB_OWNER and GITHUB_REPO in your .env file."
                )
            elif status == 401:
                message = _AUTH_FAILED
            elif status == 403:
                message = _FORBIDDEN
            else:
                message = f"Failed to list tags: {e}"
            raise TagListError(message, status_code=status) from e
        except httpx.HTTPError as e:
            raise TagListError(f"Failed to list tags: {e}") from e

        logger.debug("Listed %d tags over %d pages", len(tags), page - 1)
        return tags
