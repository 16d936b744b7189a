"""Dry-run wrapper that keeps release mutations from reaching GitHub.

Read operations (release listing, GraphQL queries, release notes) are
delegated to the wrapped client. Creating or updating a release is logged
and answered with the payload GitHub would have returned.

Usage:
    async with GitHubClient(token) as real:
        forge = DryRunForge(real)
        await forge.create_release("owner", "repo", tag_name="v1.0.0", draft=True)
"""

from __future__ import annotations

import logging
from typing import Any

from draft_release.forge.client import ForgeClient, ReleasesPage

logger = logging.getLogger(__name__)

DRY_RUN_RELEASE_ID = 0


class DryRunForge:
    def __init__(self, wrapped: ForgeClient) -> None:
        self._wrapped = wrapped
        self.mutations: list[tuple[str, dict[str, Any]]] = []

    # Queries (delegate)

    async def list_releases_page(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int,
        page_url: str | None = None,
    ) -> ReleasesPage:
        return await self._wrapped.list_releases_page(
            owner, repo, per_page=per_page, page_url=page_url
        )

    async def generate_release_notes(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        return await self._wrapped.generate_release_notes(owner, repo, **fields)

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        return await self._wrapped.graphql(query, variables)

    # Mutations (log only)

    async def create_release(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        logger.warning("[DRY RUN] Would create release in %s/%s: %s", owner, repo, fields)
        self.mutations.append(("create_release", fields))
        return {
            "id": DRY_RUN_RELEASE_ID,
            "tag_name": fields.get("tag_name"),
            "target_commitish": fields.get("target_commitish", ""),
            "name": fields.get("name"),
            "body": None,
            "published_at": None,
            "draft": fields.get("draft", True),
            "prerelease": fields.get("prerelease", False),
        }

    async def update_release(
        self, owner: str, repo: str, release_id: int, **fields: Any
    ) -> dict[str, Any]:
        logger.warning(
            "[DRY RUN] Would update release %d in %s/%s: %s",
            release_id,
            owner,
            repo,
            {key: value for key, value in fields.items() if key != "body"},
        )
        self.mutations.append(("update_release", {"release_id": release_id, **fields}))
        return {
            "id": release_id,
            "tag_name": fields.get("tag_name"),
            "target_commitish": fields.get("target_commitish", ""),
            "name": fields.get("name"),
            "body": fields.get("body"),
            "published_at": None,
            "draft": fields.get("draft", True),
            "prerelease": fields.get("prerelease", False),
        }
