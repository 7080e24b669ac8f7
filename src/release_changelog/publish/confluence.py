"""Confluence page publishing.

New release notes are prepended to the existing page body so the most
recent release is listed first. Every update bumps the page version by
exactly one; Confluence rejects the update with 409 if someone else
edited the page in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from release_changelog.exceptions import PublishError, VersionConflictError

if TYPE_CHECKING:
    from types import TracebackType

    from release_changelog.config.models import ConfluenceSettings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ConfluencePage:
    """The parts of a Confluence page needed for an update."""

    id: str
    title: str
    version: int
    body: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ConfluencePage:
        try:
            return cls(
                id=str(data["id"]),
                title=data["title"],
                version=int(data["version"]["number"]),
                body=data["body"]["storage"]["value"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PublishError(f"Unexpected Confluence page response: missing {e}") from e


class ConfluenceClient:
    """Reads and updates a single Confluence page."""

    def __init__(
        self,
        settings: ConfluenceSettings,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._client = httpx.Client(
            auth=(settings.email, settings.api_token),
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> ConfluenceClient:
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

    def get_page(self) -> ConfluencePage:
        """Fetch the configured page with its body and version.

        Raises:
            PublishError: If the page cannot be read
        """
        url = self.settings.content_url
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url, params={"expand": "body.storage,version,title"})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                message = "Confluence authentication failed. Check CONFLUENCE_EMAIL and CONFLUENCE_API_TOKEN."
            elif status == 404:
                message = f"Confluence page not found. Check CONFLUENCE_PAGE_ID: {self.settings.page_id}"
            else:
                message = f"Failed to get Confluence page: {e}"
            raise PublishError(message, status_code=status) from e
        except httpx.HTTPError as e:
            raise PublishError(f"Failed to get Confluence page: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise PublishError(f"Unexpected Confluence page response: {e}") from e
        return ConfluencePage.from_api(data)

    def prepend_to_page(self, content: str) -> ConfluencePage:
        """Prepend storage-format content to the page.

        Args:
            content: HTML (Confluence storage format) to insert at the top

        Returns:
            The page as written

        Raises:
            VersionConflictError: If the page changed since it was read
            PublishError: If the update fails for any other reason
        """
        page = self.get_page()
        updated = ConfluencePage(
            id=page.id,
            title=page.title,
            version=page.version + 1,
            body=content + page.body,
        )
        payload = {
            "id": updated.id,
            "type": "page",
            "title": updated.title,
            "version": {"number": updated.version},
            "body": {
                "storage": {
                    "value": updated.body,
                    "representation": "storage",
                },
            },
        }

        url = f"{self.settings.base_url.rstrip('/')}/wiki/rest/api/content/{page.id}"
        logger.debug("PUT %s (version %d)", url, updated.version)
        try:
            response = self._client.put(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 409:
                raise VersionConflictError() from e
            if status == 401:
                message = "Confluence authentication failed. Check CONFLUENCE_EMAIL and CONFLUENCE_API_TOKEN."
            else:
                message = f"Failed to update Confluence page: {e}"
            raise PublishError(message, status_code=status) from e
        except httpx.HTTPError as e:
            raise PublishError(f"Failed to update Confluence page: {e}") from e

        return updated
