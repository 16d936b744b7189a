"""Domain entities mapped from GitHub API payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by GitHub (``2024-01-01T00:00:00Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True, slots=True)
class Release:
    """A GitHub release.

    Drafts have no tag name until they are published, even if the API
    reports the tag that will be created.
    """

    id: int
    tag_name: str | None
    target_commitish: str
    name: str | None
    body: str | None
    published_at: datetime | None
    draft: bool
    prerelease: bool

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Release:
        draft = bool(data.get("draft", False))
        return cls(
            id=int(data["id"]),
            tag_name=None if draft else data.get("tag_name"),
            target_commitish=data.get("target_commitish") or "",
            name=data.get("name"),
            body=data.get("body"),
            published_at=parse_timestamp(data.get("published_at")),
            draft=draft,
            prerelease=bool(data.get("prerelease", False)),
        )


@dataclass(frozen=True, slots=True)
class PullRequest:
    title: str
    number: int
    base_ref_name: str
    head_ref_name: str
    state: str  # OPEN, MERGED, CLOSED
    merged_at: datetime | None

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> PullRequest:
        state = node.get("state", "")
        return cls(
            title=node.get("title", ""),
            number=int(node["number"]),
            base_ref_name=node.get("baseRefName", ""),
            head_ref_name=node.get("headRefName", ""),
            state=state,
            merged_at=parse_timestamp(node.get("mergedAt")) if state == "MERGED" else None,
        )


@dataclass(frozen=True, slots=True)
class Tag:
    name: str
    commit_oid: str

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Tag:
        # Lightweight tags point at a Commit; annotated tags point at a Tag
        # object that wraps the Commit.
        target = node.get("target") or {}
        nested = target.get("target") or {}
        return cls(name=node["name"], commit_oid=target.get("oid") or nested.get("oid") or "")


@dataclass(frozen=True, slots=True)
class Commit:
    oid: str
    committed_date: datetime
    message: str

    @property
    def short_oid(self) -> str:
        return self.oid[:8]

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> Commit:
        return cls(
            oid=node["oid"],
            committed_date=datetime.fromisoformat(node["committedDate"].replace("Z", "+00:00")),
            message=node.get("message", ""),
        )
