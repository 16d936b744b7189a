"""Configuration models for draft-release.

Configuration comes from GitHub Actions inputs and environment variables;
these models hold and validate the values once they have been read.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from draft_release.core.version import Version
from draft_release.exceptions import InvalidVersionError
from draft_release.forge.github import DEFAULT_API_URL


class GitHubConfig(BaseModel):
    """GitHub API access."""

    model_config = ConfigDict(frozen=True)

    token: SecretStr | None = None
    repository: str | None = Field(
        default=None,
        description="Repository as owner/name",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="REST API base URL (GitHub Enterprise: https://host/api/v3)",
    )
    graphql_url: str | None = Field(
        default=None,
        description="GraphQL endpoint; derived from api_url when unset",
    )
    timeout: float = Field(default=30.0, gt=0)


class DraftReleaseConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(frozen=True)

    default_tag: str = Field(
        default="v0.1.0",
        description="First version to use when no release exists",
    )
    release_branches: tuple[str, ...] = Field(
        default=(),
        description="Branches that get draft releases; empty means the current branch",
    )
    target_branch: str | None = Field(
        default=None,
        description="Branch to act on instead of the one that triggered the run",
    )
    per_page: int = Field(default=30, ge=1, le=100)
    max_pages: int = Field(default=5, ge=1)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @field_validator("default_tag")
    @classmethod
    def _check_default_tag(cls, value: str) -> str:
        try:
            Version.parse(value)
        except InvalidVersionError as e:
            raise ValueError(str(e)) from e
        return value

    @field_validator("release_branches", mode="before")
    @classmethod
    def _split_branches(cls, value: object) -> object:
        if isinstance(value, str):
            return split_list(value)
        return value


def split_list(value: str) -> tuple[str, ...]:
    """Split a newline- or comma-separated input into its non-empty items."""
    items = value.replace(",", "\n").splitlines()
    return tuple(item.strip() for item in items if item.strip())
