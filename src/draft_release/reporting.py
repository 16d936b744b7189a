"""Report action results as workflow outputs and console summaries."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel

from draft_release.core.action import (
    ActionResult,
    CreatedReleaseResult,
    NoUpdateResult,
    UpdatedReleaseResult,
    VersionInferenceResult,
)

if TYPE_CHECKING:
    from rich.console import Console

    from draft_release.forge.models import Release


def result_outputs(result: ActionResult) -> dict[str, str]:
    """Map a result to workflow output names and values."""
    outputs = {"action": result.action}
    if result.last_version is not None:
        outputs["last-version"] = str(result.last_version)

    match result:
        case NoUpdateResult():
            pass
        case VersionInferenceResult() | CreatedReleaseResult() | UpdatedReleaseResult():
            outputs["next-version"] = result.version.core
            outputs["next-version-full"] = str(result.version)
            outputs["version-increment"] = str(result.version_increment)
            if isinstance(result, CreatedReleaseResult | UpdatedReleaseResult):
                outputs["release-id"] = str(result.release.id)
    return outputs


def write_outputs(outputs: Mapping[str, str], path: Path) -> None:
    """Append outputs to a ``$GITHUB_OUTPUT`` file.

    Multi-line values use the ``name<<DELIMITER`` form.
    """
    lines: list[str] = []
    for name, value in outputs.items():
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            lines.extend([f"{name}<<{delimiter}", value, delimiter])
        else:
            lines.append(f"{name}={value}")

    with path.open("a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def render_summary(result: ActionResult, console: Console, *, release_branch: bool) -> None:
    """Print a human-readable summary of what happened."""
    if release_branch:
        console.print("\n[bold]Release branch:[/] Full release management")
    else:
        console.print("\n[bold]Feature branch:[/] Version inference only")

    console.print(f"Action Taken: [cyan]{result.action}[/]")

    match result:
        case NoUpdateResult():
            console.print(f"Last Release: {_release_name(result.last_release)}")
            console.print(f"Current Draft: {_release_name(result.last_draft)}")
            if release_branch:
                console.print(
                    "[yellow]No outstanding PRs found, so a draft release was "
                    "neither created nor updated[/]"
                )
            else:
                console.print("[yellow]No open PR from this branch, so no version was inferred[/]")
            return
        case VersionInferenceResult():
            console.print(f"Last Release: {_release_name(result.last_release)}")
        case CreatedReleaseResult() | UpdatedReleaseResult():
            console.print(f"Last Release: {_release_name(result.last_release)}")
            console.print(f"Current Draft: {_release_name(result.last_draft)}")

    if result.last_version is not None:
        console.print(f"Last Version: {result.last_version}")
    console.print("Pull Requests:")
    for title in result.pull_request_titles:
        console.print(f"  [dim]•[/] {escape(title)}", highlight=False)
    console.print(f"Version Increment: [cyan]{result.version_increment}[/]")
    console.print(f"Next Version: [green]{result.version.core}[/] ({result.version})")

    if isinstance(result, CreatedReleaseResult | UpdatedReleaseResult):
        verb = "Created" if result.action == "created" else "Updated"
        console.print(
            Panel(
                escape(result.release.body) if result.release.body else "[dim](no body)[/]",
                title=f"[green]{verb} Draft: {_release_name(result.release)}[/]",
                border_style="green",
            )
        )


def _release_name(release: Release | None) -> str:
    if release is None:
        return "(none)"
    return release.name or release.tag_name or f"#{release.id}"
