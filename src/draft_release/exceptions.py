"""Exception hierarchy for draft-release.

All errors raised by the package derive from DraftReleaseError so the
CLI can report them uniformly. Forge errors are raised as soon as the
API rejects a request; nothing in this package retries them.
"""

from __future__ import annotations


class DraftReleaseError(Exception):
    """Base exception for all draft-release errors."""


# Configuration


class ConfigError(DraftReleaseError):
    """Configuration is missing or cannot be read."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


# Versions


class VersionError(DraftReleaseError):
    """Base class for version errors."""


class InvalidVersionError(VersionError):
    """A version string does not follow the semantic version grammar."""

    def __init__(self, version: str, reason: str | None = None) -> None:
        self.version = version
        message = f"Invalid version: {version!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class VersionBumpError(VersionError):
    """A validated version could not be bumped."""


# Forge (GitHub API)


class ForgeError(DraftReleaseError):
    """Base class for errors reported by the forge API."""


class ForgeRequestError(ForgeError):
    """The forge rejected a request."""

    def __init__(self, message: str, *, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"{message} [{status_code} {url}]")


class ForgeAuthError(ForgeRequestError):
    """The credential is missing, invalid or lacks permission."""


class RateLimitError(ForgeRequestError):
    """The API rate limit was exceeded."""


class ForgeNotFoundError(ForgeRequestError):
    """The requested resource does not exist."""


class GraphQLError(ForgeError):
    """A GraphQL query returned errors."""

    def __init__(self, errors: list[dict[str, object]]) -> None:
        self.errors = errors
        messages = "; ".join(str(e.get("message", e)) for e in errors) or "unknown error"
        super().__init__(f"GraphQL query failed: {messages}")


class BranchNotFoundError(ForgeError):
    """A branch referenced by a query does not exist."""

    def __init__(self, branch: str, owner: str, repo: str) -> None:
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found in repository {owner}/{repo}")
