"""Configuration models for release-changelog.

Two kinds of configuration exist:

- ChangelogPolicy: the user-supplied JSON policy controlling author
  filtering, ignored commit types and section titles.
- Settings: credentials and repository coordinates read from the
  environment (or a .env file) once at startup.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from release_changelog.exceptions import ConfigError, PublishError

DEFAULT_SECTION = "Others"

GITHUB_REQUIRED_SETTINGS = ("GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO")
CONFLUENCE_REQUIRED_SETTINGS = (
    "CONFLUENCE_BASE_URL",
    "CONFLUENCE_PAGE_ID",
    "CONFLUENCE_EMAIL",
    "CONFLUENCE_API_TOKEN",
)


class ChangelogPolicy(BaseModel):
    """Policy controlling which commits appear and under which section.

    Attributes:
        authors: Allow-listed identity substrings (case-insensitive).
            Empty means every author is allowed.
        ignore_types: Commit types dropped entirely.
        types: Mapping of commit type to section title. Unmapped types
            are collected under "Others".
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    authors: list[str] = Field(default_factory=list)
    ignore_types: list[str] = Field(default_factory=list, alias="ignoreTypes")
    types: dict[str, str] = Field(default_factory=dict)

    @field_validator("authors", "ignore_types", "types", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "types" else []
        return value

    @field_validator("ignore_types")
    @classmethod
    def _lowercase_ignore_types(cls, value: list[str]) -> list[str]:
        return [t.strip().lower() for t in value]

    @field_validator("types")
    @classmethod
    def _lowercase_type_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return {k.strip().lower(): v for k, v in value.items()}

    def is_ignored(self, commit_type: str) -> bool:
        """Check whether commits of this type are dropped."""
        return commit_type in self.ignore_types

    def section_for(self, commit_type: str) -> str:
        """Get the section title for a commit type."""
        return self.types.get(commit_type) or DEFAULT_SECTION


class GitHubSettings(BaseModel):
    """Credentials and coordinates of the GitHub repository."""

    model_config = ConfigDict(frozen=True)

    token: str
    owner: str
    repo: str
    api_url: str = "https://api.github.com"
    server_url: str = "https://github.com"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def repository_url(self) -> str:
        """Web URL of the repository, used for pull request links."""
        return f"{self.server_url.rstrip('/')}/{self.owner}/{self.repo}"


class ConfluenceSettings(BaseModel):
    """Credentials and target page of the Confluence wiki."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    page_id: str
    email: str
    api_token: str

    @property
    def content_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/wiki/rest/api/content/{self.page_id}"


class Settings(BaseSettings):
    """Runtime settings read from environment variables and .env.

    Variable names match the field names in upper case, e.g.
    ``GITHUB_TOKEN`` or ``CONFLUENCE_PAGE_ID``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    github_token: str | None = None
    github_owner: str | None = None
    github_repo: str | None = None
    github_api_url: str = "https://api.github.com"
    github_server_url: str = "https://github.com"

    confluence_base_url: str | None = None
    confluence_page_id: str | None = None
    confluence_email: str | None = None
    confluence_api_token: str | None = None

    def _missing(self, names: tuple[str, ...]) -> list[str]:
        return [name for name in names if not getattr(self, name.lower())]

    def missing_github_settings(self) -> list[str]:
        """Names of required GitHub variables that are unset or empty."""
        return self._missing(GITHUB_REQUIRED_SETTINGS)

    @property
    def publishing_enabled(self) -> bool:
        """Publishing is enabled by setting CONFLUENCE_PAGE_ID."""
        return bool(self.confluence_page_id)

    @property
    def github(self) -> GitHubSettings:
        missing = self.missing_github_settings()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return GitHubSettings(
            token=self.github_token,
            owner=self.github_owner,
            repo=self.github_repo,
            api_url=self.github_api_url,
            server_url=self.github_server_url,
        )

    @property
    def confluence(self) -> ConfluenceSettings:
        """Confluence settings; incomplete settings fail as a publish error."""
        missing = self._missing(CONFLUENCE_REQUIRED_SETTINGS)
        if missing:
            raise PublishError(f"Missing Confluence environment variables: {', '.join(missing)}")
        return ConfluenceSettings(
            base_url=self.confluence_base_url,
            page_id=self.confluence_page_id,
            email=self.confluence_email,
            api_token=self.confluence_api_token,
        )
