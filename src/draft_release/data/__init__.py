"""Paginated GitHub data sources.

Each fetch_* function returns a lazy handle; pages are requested only as
the handle is iterated, and already fetched items are cached.
"""

from __future__ import annotations

from draft_release.data.commits import Commits, fetch_commits
from draft_release.data.pull_requests import (
    IncomingPullRequests,
    OutgoingPullRequests,
    PullRequests,
    fetch_pull_requests,
)
from draft_release.data.release import create_draft_release, update_release
from draft_release.data.release_notes import generate_release_notes
from draft_release.data.releases import Releases, fetch_releases
from draft_release.data.tags import Tags, fetch_tags

__all__ = [
    "Commits",
    "IncomingPullRequests",
    "OutgoingPullRequests",
    "PullRequests",
    "Releases",
    "Tags",
    "create_draft_release",
    "fetch_commits",
    "fetch_pull_requests",
    "fetch_releases",
    "fetch_tags",
    "generate_release_notes",
    "update_release",
]
