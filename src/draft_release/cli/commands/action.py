"""Implementation of the 'action' command.

This is the GitHub Actions entry point: it reads the action inputs and
workflow environment, runs the release or feature branch logic, prints a
summary and writes the step outputs.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import httpx

from draft_release.config import create_context, load_config, require_token
from draft_release.core.action import ActionResult, perform_action
from draft_release.exceptions import DraftReleaseError
from draft_release.forge.github import GitHubClient
from draft_release.reporting import render_summary, result_outputs, write_outputs

if TYPE_CHECKING:
    from rich.console import Console

    from draft_release.config.models import DraftReleaseConfig
    from draft_release.forge.client import ForgeClient


def run_action(
    console: Console,
    err_console: Console,
    *,
    environ: Mapping[str, str] | None = None,
    forge: ForgeClient | None = None,
) -> ActionResult:
    """Run the action.

    Args:
        console: Console for standard output
        err_console: Console for error output
        environ: Environment to read instead of os.environ
        forge: Client to use instead of a GitHubClient built from the config

    Returns:
        The result of the run
    """
    env = os.environ if environ is None else environ

    try:
        config = load_config(env)
    except DraftReleaseError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    try:
        result, release_branch = asyncio.run(_perform(config, env, forge))
    except (DraftReleaseError, httpx.HTTPError) as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    render_summary(result, console, release_branch=release_branch)

    outputs = result_outputs(result)
    output_path = env.get("GITHUB_OUTPUT")
    if output_path:
        write_outputs(outputs, Path(output_path))
    else:
        for name, value in outputs.items():
            console.print(f"[dim]{name}[/]={value}", highlight=False)
    return result


async def _perform(
    config: DraftReleaseConfig,
    environ: Mapping[str, str],
    forge: ForgeClient | None,
) -> tuple[ActionResult, bool]:
    if forge is not None:
        return await _perform_with(config, environ, forge)

    async with GitHubClient(
        require_token(config.github),
        api_url=config.github.api_url,
        graphql_url=config.github.graphql_url,
        timeout=config.github.timeout,
    ) as client:
        return await _perform_with(config, environ, client)


async def _perform_with(
    config: DraftReleaseConfig,
    environ: Mapping[str, str],
    forge: ForgeClient,
) -> tuple[ActionResult, bool]:
    ctx = create_context(config, forge, environ)
    result = await perform_action(
        ctx, config.default_tag, per_page=config.per_page, max_pages=config.max_pages
    )
    return result, ctx.is_release_branch()
