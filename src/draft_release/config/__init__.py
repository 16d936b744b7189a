"""Configuration management for draft-release."""

from __future__ import annotations

from draft_release.config.loader import (
    create_context,
    get_input,
    load_config,
    require_token,
    resolve_branch,
    split_repository,
)
from draft_release.config.models import DraftReleaseConfig, GitHubConfig

__all__ = [
    "DraftReleaseConfig",
    "GitHubConfig",
    "create_context",
    "get_input",
    "load_config",
    "require_token",
    "resolve_branch",
    "split_repository",
]
