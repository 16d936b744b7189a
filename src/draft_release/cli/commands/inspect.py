"""Implementation of the read-only 'releases', 'pulls' and 'tags' commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING, TypeVar

import httpx
from rich.table import Table

from draft_release.context import Context
from draft_release.data.pull_requests import IncomingPullRequests, fetch_pull_requests
from draft_release.data.releases import fetch_releases
from draft_release.data.tags import fetch_tags
from draft_release.exceptions import DraftReleaseError
from draft_release.forge.github import DEFAULT_API_URL, GitHubClient

if TYPE_CHECKING:
    from rich.console import Console

    from draft_release.forge.client import ForgeClient
    from draft_release.forge.models import PullRequest, Release, Tag

T = TypeVar("T")


def _run_query(
    owner: str,
    repo: str,
    branch: str,
    token: str | None,
    err_console: Console,
    query: Callable[[Context], Awaitable[T]],
    *,
    api_url: str = DEFAULT_API_URL,
    forge: ForgeClient | None = None,
) -> T:
    if forge is None and not token:
        err_console.print("[red]Error:[/] GITHUB_TOKEN is not set but required for GraphQL queries")
        raise SystemExit(1)

    def context(client: ForgeClient) -> Context:
        return Context(forge=client, owner=owner, repo=repo, branch=branch, release_branches=(branch,))

    async def _query() -> T:
        if forge is not None:
            return await query(context(forge))
        async with GitHubClient(token or "", api_url=api_url) as client:
            return await query(context(client))

    try:
        return asyncio.run(_query())
    except (DraftReleaseError, httpx.HTTPError) as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


def run_releases(
    owner: str,
    repo: str,
    branch: str,
    token: str | None,
    console: Console,
    err_console: Console,
    *,
    forge: ForgeClient | None = None,
) -> tuple[Release | None, Release | None]:
    """Show the last draft and last published release of a branch."""

    async def _lookup(ctx: Context) -> tuple[Release | None, Release | None]:
        releases = fetch_releases(ctx)
        return await releases.find_last_draft(branch), await releases.find_last(branch)

    last_draft, last_release = _run_query(owner, repo, branch, token, err_console, _lookup, forge=forge)

    table = Table(title=f"Releases of {owner}/{repo} targeting {branch}")
    table.add_column("Kind")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Tag")
    table.add_column("Published")
    for kind, release in (("Last draft", last_draft), ("Last release", last_release)):
        if release is None:
            table.add_row(kind, "-", "(none)", "-", "-")
        else:
            published = release.published_at.isoformat() if release.published_at else "-"
            table.add_row(kind, str(release.id), release.name or "", release.tag_name or "-", published)
    console.print(table)
    return last_draft, last_release


def run_pulls(
    owner: str,
    repo: str,
    branch: str,
    merged_since: datetime | None,
    token: str | None,
    console: Console,
    err_console: Console,
    *,
    forge: ForgeClient | None = None,
) -> list[PullRequest]:
    """List pull requests merged into a branch, optionally since a date."""

    async def _collect(ctx: Context) -> list[PullRequest]:
        return await fetch_pull_requests(
            ctx, IncomingPullRequests(base_ref_name=branch, merged_since=merged_since)
        ).collect()

    since = f" since {merged_since.isoformat()}" if merged_since else ""
    console.print(f"Fetching pull requests for [cyan]{owner}/{repo}@{branch}[/]{since}...")
    pull_requests = _run_query(owner, repo, branch, token, err_console, _collect, forge=forge)

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Merged")
    for pr in pull_requests:
        merged = pr.merged_at.isoformat() if pr.merged_at else "-"
        table.add_row(str(pr.number), pr.title, merged)
    console.print(table)
    return pull_requests


def run_tags(
    owner: str,
    repo: str,
    token: str | None,
    console: Console,
    err_console: Console,
    *,
    forge: ForgeClient | None = None,
) -> Tag | None:
    """Show the newest tag shaped like a version."""

    async def _find(ctx: Context) -> Tag | None:
        return await fetch_tags(ctx).find_first_semver_tag()

    tag = _run_query(owner, repo, "", token, err_console, _find, forge=forge)
    if tag is None:
        console.print("[yellow]No version tag found[/]")
    else:
        console.print(f"Latest version tag: [green]{tag.name}[/] ({tag.commit_oid[:8]})")
    return tag
