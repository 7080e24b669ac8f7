"""Tests for Confluence publishing."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from release_changelog.config.models import ConfluenceSettings
from release_changelog.exceptions import PublishError, VersionConflictError
from release_changelog.publish.confluence import ConfluenceClient, ConfluencePage

CONTENT_URL = "https://acme.atlassian.net/wiki/rest/api/content/123"


@pytest.fixture
def confluence_settings() -> ConfluenceSettings:
    return ConfluenceSettings(
        base_url="https://acme.atlassian.net",
        page_id="123",
        email="bot@acme.com",
        api_token="secret",
    )


def _page(version: int = 7, body: str = "<h2>v1</h2>") -> dict:
    return {
        "id": "123",
        "title": "Release Notes",
        "version": {"number": version},
        "body": {"storage": {"value": body, "representation": "storage"}},
    }


def _client(settings: ConfluenceSettings, handler) -> ConfluenceClient:
    return ConfluenceClient(settings, transport=httpx.MockTransport(handler))


class TestGetPage:
    """Tests for ConfluenceClient.get_page()."""

    def test_get_page(self, confluence_settings: ConfluenceSettings):
        """The page is fetched with body, version and title expanded."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_page())

        with _client(confluence_settings, handler) as client:
            page = client.get_page()

        assert page == ConfluencePage(id="123", title="Release Notes", version=7, body="<h2>v1</h2>")
        assert str(requests[0].url).startswith(CONTENT_URL)
        assert requests[0].url.params["expand"] == "body.storage,version,title"
        expected = base64.b64encode(b"bot@acme.com:secret").decode()
        assert requests[0].headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.parametrize(
        ("status", "message"),
        [
            (401, "authentication failed"),
            (404, "page not found. Check CONFLUENCE_PAGE_ID: 123"),
            (500, "Failed to get Confluence page"),
        ],
    )
    def test_http_errors(self, confluence_settings: ConfluenceSettings, status: int, message: str):
        """HTTP errors are mapped to PublishError."""
        with _client(confluence_settings, lambda r: httpx.Response(status)) as client:
            with pytest.raises(PublishError, match=message):
                client.get_page()

    def test_unexpected_payload(self, confluence_settings: ConfluenceSettings):
        """A payload without the expanded fields is a PublishError."""
        with _client(confluence_settings, lambda r: httpx.Response(200, json={"id": "123"})) as client:
            with pytest.raises(PublishError, match="Unexpected Confluence page response"):
                client.get_page()

    @pytest.mark.parametrize(
        "body",
        [
            {"text": "<html>Log in</html>", "headers": {"Content-Type": "text/html"}},
            {"json": ["not", "a", "page"]},
        ],
    )
    def test_non_page_body(self, confluence_settings: ConfluenceSettings, body: dict):
        """A login page or a non-object body is a PublishError."""
        with _client(confluence_settings, lambda r: httpx.Response(200, **body)) as client:
            with pytest.raises(PublishError, match="Unexpected Confluence page response"):
                client.get_page()


class TestPrependToPage:
    """Tests for ConfluenceClient.prepend_to_page()."""

    def test_prepends_and_bumps_version(self, confluence_settings: ConfluenceSettings):
        """New content goes first and the version increases by one."""
        puts: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=_page(version=7, body="<h2>v1</h2>"))
            assert request.method == "PUT"
            assert str(request.url) == CONTENT_URL
            puts.append(json.loads(request.content))
            return httpx.Response(200, json={})

        with _client(confluence_settings, handler) as client:
            page = client.prepend_to_page("<h2>v2</h2>")

        assert page.version == 8
        assert puts == [
            {
                "id": "123",
                "type": "page",
                "title": "Release Notes",
                "version": {"number": 8},
                "body": {
                    "storage": {
                        "value": "<h2>v2</h2><h2>v1</h2>",
                        "representation": "storage",
                    }
                },
            }
        ]

    def test_version_conflict(self, confluence_settings: ConfluenceSettings):
        """A 409 on update is a distinct VersionConflictError."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=_page())
            return httpx.Response(409)

        with _client(confluence_settings, handler) as client:
            with pytest.raises(VersionConflictError, match="modified by another user") as exc_info:
                client.prepend_to_page("<h2>v2</h2>")

        assert exc_info.value.status_code == 409
        assert not exc_info.value.fatal

    def test_update_failure(self, confluence_settings: ConfluenceSettings):
        """Other update failures are plain PublishErrors."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json=_page())
            return httpx.Response(400)

        with _client(confluence_settings, handler) as client:
            with pytest.raises(PublishError, match="Failed to update Confluence page") as exc_info:
                client.prepend_to_page("<h2>v2</h2>")

        assert not isinstance(exc_info.value, VersionConflictError)
