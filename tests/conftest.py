"""Shared fixtures: an in-memory forge that paginates staged data and records calls."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from draft_release.context import Context
from draft_release.forge.client import ReleasesPage

FAKE_API_URL = "https://api.github.test"


class FakeForge:
    """In-memory ForgeClient.

    Staged items are served in the order they were added, which stands in
    for the order GitHub would list them in. Every call is recorded.
    """

    def __init__(self, *, notes_body: str = "## What's Changed\n* Generated notes") -> None:
        self.releases: list[dict[str, Any]] = []
        self.pull_requests: list[dict[str, Any]] = []
        self.tags: list[dict[str, Any]] = []
        self.commits: dict[str, list[dict[str, Any]]] = {}
        self.notes_body = notes_body

        self.list_calls: list[int] = []
        self.graphql_calls: list[dict[str, Any]] = []
        self.create_calls: list[dict[str, Any]] = []
        self.update_calls: list[dict[str, Any]] = []
        self.notes_calls: list[dict[str, Any]] = []
        self._next_id = 1000
        self._failures: set[tuple[str, int]] = set()

    # Staging

    def add_release(
        self,
        tag_name: str | None = None,
        *,
        target: str = "main",
        draft: bool = False,
        prerelease: bool = False,
        published_at: str | None = None,
        name: str | None = None,
        body: str | None = None,
    ) -> dict[str, Any]:
        self._next_id += 1
        release = {
            "id": self._next_id,
            "tag_name": tag_name,
            "target_commitish": target,
            "name": name if name is not None else tag_name,
            "body": body,
            "published_at": None if draft else (published_at or "2024-01-01T00:00:00Z"),
            "draft": draft,
            "prerelease": prerelease,
        }
        self.releases.append(release)
        return release

    def add_pull_request(
        self,
        title: str,
        *,
        base: str = "main",
        head: str = "feature",
        state: str = "MERGED",
        merged_at: str | None = "2024-06-01T00:00:00Z",
    ) -> dict[str, Any]:
        node = {
            "title": title,
            "number": len(self.pull_requests) + 1,
            "baseRefName": base,
            "headRefName": head,
            "state": state,
            "mergedAt": merged_at if state == "MERGED" else None,
        }
        self.pull_requests.append(node)
        return node

    def add_tag(self, name: str, oid: str, *, annotated: bool = False) -> None:
        target = {"target": {"oid": oid}} if annotated else {"oid": oid}
        self.tags.append({"name": name, "target": target})

    def add_commit(self, branch: str, oid: str, message: str, committed_date: str) -> None:
        self.commits.setdefault(branch, []).append(
            {"oid": oid, "message": message, "committedDate": committed_date}
        )

    def fail_once(self, method: str, call_number: int) -> None:
        """Make the Nth call to ``method`` (counting from 1) raise ConnectionError."""
        self._failures.add((method, call_number))

    def _maybe_fail(self, method: str, call_number: int) -> None:
        if (method, call_number) in self._failures:
            self._failures.discard((method, call_number))
            raise ConnectionError(f"{method} failed")

    # ForgeClient

    async def list_releases_page(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int,
        page_url: str | None = None,
    ) -> ReleasesPage:
        page = 1 if page_url is None else int(page_url.rsplit("page=", 1)[1])
        self.list_calls.append(page)
        self._maybe_fail("list_releases_page", len(self.list_calls))
        start = (page - 1) * per_page
        items = self.releases[start : start + per_page]
        next_url = None
        if start + per_page < len(self.releases):
            next_url = (
                f"{FAKE_API_URL}/repos/{owner}/{repo}/releases?per_page={per_page}&page={page + 1}"
            )
        return ReleasesPage(items=items, next_url=next_url)

    async def create_release(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        self.create_calls.append(fields)
        self._next_id += 1
        return {
            "id": self._next_id,
            "tag_name": fields["tag_name"],
            "target_commitish": fields.get("target_commitish", ""),
            "name": fields.get("name"),
            "body": self.notes_body if fields.get("generate_release_notes") else None,
            "published_at": None,
            "draft": fields.get("draft", False),
            "prerelease": fields.get("prerelease", False),
        }

    async def update_release(
        self, owner: str, repo: str, release_id: int, **fields: Any
    ) -> dict[str, Any]:
        self.update_calls.append({"release_id": release_id, **fields})
        existing = next((r for r in self.releases if r["id"] == release_id), {"id": release_id})
        return {**existing, **fields}

    async def generate_release_notes(self, owner: str, repo: str, **fields: Any) -> dict[str, Any]:
        self.notes_calls.append(fields)
        return {"name": fields["tag_name"], "body": self.notes_body}

    async def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        self.graphql_calls.append(variables)
        self._maybe_fail("graphql", len(self.graphql_calls))
        per_page = variables["perPage"]
        cursor = variables.get("cursor")

        if "pullRequests(" in query:
            nodes = [
                node
                for node in self.pull_requests
                if node["state"] == variables["state"]
                and variables.get("baseRefName") in (None, node["baseRefName"])
                and variables.get("headRefName") in (None, node["headRefName"])
            ]
            return {"repository": {"pullRequests": _connection(nodes, per_page, cursor)}}

        if "refs(" in query:
            return {"repository": {"refs": _connection(self.tags, per_page, cursor)}}

        if "history(" in query:
            branch = variables["branch"]
            if branch not in self.commits:
                return {"repository": {"ref": None}}
            history = _connection(self.commits[branch], per_page, cursor)
            return {"repository": {"ref": {"target": {"history": history}}}}

        raise AssertionError(f"Unexpected query: {query}")

    @property
    def mutated(self) -> bool:
        return bool(self.create_calls or self.update_calls)


def _connection(nodes: list[dict[str, Any]], per_page: int, cursor: str | None) -> dict[str, Any]:
    start = int(cursor) if cursor else 0
    end = start + per_page
    return {
        "pageInfo": {"hasNextPage": end < len(nodes), "endCursor": str(end)},
        "nodes": nodes[start:end],
    }


@pytest.fixture
def forge() -> FakeForge:
    return FakeForge()


@pytest.fixture
def make_context(forge: FakeForge) -> Callable[..., Context]:
    """Build a Context for ``octo/widgets`` backed by the fake forge."""

    def _make(
        branch: str = "main",
        release_branches: tuple[str, ...] | None = None,
        run_number: str | None = None,
        run_attempt: str | None = None,
    ) -> Context:
        return Context(
            forge=forge,
            owner="octo",
            repo="widgets",
            branch=branch,
            release_branches=release_branches if release_branches is not None else (branch,),
            run_number=run_number,
            run_attempt=run_attempt,
        )

    return _make
