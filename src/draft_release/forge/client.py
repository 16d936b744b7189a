"""The narrow forge interface used by the fetchers.

Only these operations are needed: one page of the release listing, release
create/update, generated release notes, and GraphQL queries. Tests
implement this protocol directly instead of mocking an HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class ReleasesPage:
    """One page of the REST release listing."""

    items: list[dict[str, Any]] = field(default_factory=list)
    next_url: str | None = None


class ForgeClient(Protocol):
    async def list_releases_page(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int,
        page_url: str | None = None,
    ) -> ReleasesPage:
        """Fetch one page of releases; ``page_url`` continues a previous page."""
        ...

    async def create_release(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]: ...

    async def update_release(
        self, owner: str, repo: str, release_id: int, **fields: Any
    ) -> dict[str, Any]: ...

    async def generate_release_notes(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]: ...

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` object."""
        ...
