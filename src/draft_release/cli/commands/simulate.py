"""Implementation of the 'simulate' command.

Runs the same decision logic as the action against a real repository,
with release creation and updates replaced by dry-run log messages.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
from rich.panel import Panel

from draft_release.context import Context
from draft_release.core.action import ActionResult, perform_action
from draft_release.exceptions import DraftReleaseError
from draft_release.forge.dry_run import DryRunForge
from draft_release.forge.github import DEFAULT_API_URL, GitHubClient
from draft_release.reporting import render_summary, result_outputs

if TYPE_CHECKING:
    from rich.console import Console

    from draft_release.forge.client import ForgeClient


def run_simulate(
    owner: str,
    repo: str,
    branch: str,
    default_tag: str,
    release_branches: list[str],
    token: str | None,
    console: Console,
    err_console: Console,
    *,
    api_url: str = DEFAULT_API_URL,
    forge: ForgeClient | None = None,
) -> ActionResult:
    """Run the simulate command.

    Args:
        owner: Repository owner
        repo: Repository name
        branch: Branch to simulate a run for
        default_tag: First version when no release exists
        release_branches: Release branches; defaults to ``branch`` itself
        token: GitHub token
        console: Console for standard output
        err_console: Console for error output
        api_url: GitHub REST API base URL
        forge: Client to wrap instead of a GitHubClient
    """
    if forge is None and not token:
        err_console.print("[red]Error:[/] GITHUB_TOKEN is not set but required for GraphQL queries")
        raise SystemExit(1)

    console.print(f"Simulating draft release for [cyan]{owner}/{repo}@{branch}[/]...")

    async def _simulate() -> tuple[ActionResult, DryRunForge]:
        if forge is not None:
            dry_run = DryRunForge(forge)
            return await _run(dry_run), dry_run
        async with GitHubClient(token or "", api_url=api_url) as client:
            dry_run = DryRunForge(client)
            return await _run(dry_run), dry_run

    async def _run(dry_run: DryRunForge) -> ActionResult:
        ctx = Context(
            forge=dry_run,
            owner=owner,
            repo=repo,
            branch=branch,
            release_branches=tuple(release_branches) or (branch,),
        )
        return await perform_action(ctx, default_tag)

    try:
        result, dry_run = asyncio.run(_simulate())
    except (DraftReleaseError, httpx.HTTPError) as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    render_summary(result, console, release_branch=branch in (release_branches or [branch]))

    outputs = "\n".join(f"  {name}={value}" for name, value in result_outputs(result).items())
    mutations = "\n".join(f"  • {name}" for name, _ in dry_run.mutations) or "  (none)"
    console.print(
        Panel(
            f"[bold]Outputs:[/]\n{outputs}\n\n[bold]Skipped mutations:[/]\n{mutations}",
            title="[yellow]Dry Run[/]",
            border_style="yellow",
        )
    )
    return result
