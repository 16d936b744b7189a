"""Core business logic for draft-release.

This module contains the fundamental building blocks:
- Version parsing and manipulation (SemVer 2.0.0)
- Conventional commit classification
- Version inference from pull requests
- The release/feature branch orchestration
"""

from __future__ import annotations

from draft_release.core.action import (
    ActionResult,
    CreatedReleaseResult,
    NoUpdateResult,
    UpdatedReleaseResult,
    VersionInferenceResult,
    perform_action,
)
from draft_release.core.commits import max_impact, message_impact
from draft_release.core.inference import calculate_next_version, infer_impact_from_pull_requests
from draft_release.core.version import BumpType, Version, branch_prerelease, parse_version

__all__ = [
    # Orchestration
    "ActionResult",
    # Version
    "BumpType",
    "CreatedReleaseResult",
    "NoUpdateResult",
    "UpdatedReleaseResult",
    "Version",
    "VersionInferenceResult",
    "branch_prerelease",
    # Inference
    "calculate_next_version",
    "infer_impact_from_pull_requests",
    # Commits
    "max_impact",
    "message_impact",
    "parse_version",
    "perform_action",
]
