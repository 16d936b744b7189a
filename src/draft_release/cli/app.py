"""Typer application wiring the draft-release commands."""

from __future__ import annotations

import logging
from datetime import UTC

import typer
from rich.console import Console
from rich.logging import RichHandler

from draft_release import __version__
from draft_release.cli.commands import run_action, run_pulls, run_releases, run_simulate, run_tags
from draft_release.forge.github import DEFAULT_API_URL
from draft_release.forge.models import parse_timestamp

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Maintain a draft GitHub release from merged pull requests.",
)

TOKEN_OPTION = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token.", show_default=False)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


@app.command()
def action() -> None:
    """Run as a GitHub Action, reading INPUT_* and GITHUB_* variables."""
    run_action(console, err_console)


@app.command()
def simulate(
    owner: str = typer.Argument(..., help="Repository owner."),
    repo: str = typer.Argument(..., help="Repository name."),
    branch: str = typer.Argument(..., help="Branch to simulate a run for."),
    default_tag: str = typer.Option("v0.1.0", "--default-tag", help="Version used when no release exists."),
    release_branch: list[str] = typer.Option(
        [], "--release-branch", "-r", help="Release branch (repeatable). Defaults to BRANCH."
    ),
    token: str | None = TOKEN_OPTION,
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", envvar="GITHUB_API_URL"),
) -> None:
    """Show what the action would do for BRANCH without changing any release."""
    run_simulate(
        owner,
        repo,
        branch,
        default_tag,
        release_branch,
        token,
        console,
        err_console,
        api_url=api_url,
    )


@app.command()
def releases(
    owner: str = typer.Argument(..., help="Repository owner."),
    repo: str = typer.Argument(..., help="Repository name."),
    branch: str = typer.Option("main", "--branch", "-b", help="Target branch."),
    token: str | None = TOKEN_OPTION,
) -> None:
    """Show the last draft and last published release of a branch."""
    run_releases(owner, repo, branch, token, console, err_console)


@app.command()
def pulls(
    owner: str = typer.Argument(..., help="Repository owner."),
    repo: str = typer.Argument(..., help="Repository name."),
    branch: str = typer.Argument(..., help="Base branch."),
    merged_since: str | None = typer.Option(
        None, "--merged-since", help="Only pull requests merged at or after this ISO-8601 time."
    ),
    token: str | None = TOKEN_OPTION,
) -> None:
    """List pull requests merged into BRANCH, newest first."""
    try:
        since = parse_timestamp(merged_since)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--merged-since") from e
    if since is not None and since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    run_pulls(owner, repo, branch, since, token, console, err_console)


@app.command()
def tags(
    owner: str = typer.Argument(..., help="Repository owner."),
    repo: str = typer.Argument(..., help="Repository name."),
    token: str | None = TOKEN_OPTION,
) -> None:
    """Show the newest tag shaped like vMAJOR.MINOR.PATCH."""
    run_tags(owner, repo, token, console, err_console)


def main() -> None:
    app()
