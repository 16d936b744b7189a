"""CLI command implementations."""

from __future__ import annotations

from draft_release.cli.commands.action import run_action
from draft_release.cli.commands.inspect import run_pulls, run_releases, run_tags
from draft_release.cli.commands.simulate import run_simulate

__all__ = [
    "run_action",
    "run_pulls",
    "run_releases",
    "run_simulate",
    "run_tags",
]
