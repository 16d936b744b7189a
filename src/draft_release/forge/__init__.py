"""GitHub API access for draft-release."""

from __future__ import annotations

from draft_release.forge.client import ForgeClient, ReleasesPage
from draft_release.forge.dry_run import DryRunForge
from draft_release.forge.github import GitHubClient
from draft_release.forge.models import Commit, PullRequest, Release, Tag

__all__ = [
    "Commit",
    "DryRunForge",
    "ForgeClient",
    "GitHubClient",
    "PullRequest",
    "Release",
    "ReleasesPage",
    "Tag",
]
