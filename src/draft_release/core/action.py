"""Decide what to do for a branch and do it.

On a release branch, a draft release is kept up to date with the pull
requests merged since the last published release:

1. Look up the last draft and last published release for the branch
2. Collect pull requests merged since the last release was published
3. Infer the version increment from their conventional commit titles
4. Update the existing draft, or create one, with the next version
5. Do nothing if nothing was merged

On any other (feature) branch, the next version is only inferred:

1. Find the open pull request from the branch to learn its target branch
2. Look up the last release on the target branch
3. Infer the increment from the pull requests merged there plus the feature
   pull request itself, and tag the version with the branch name

A feature branch never creates or updates a release.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Literal

from draft_release.context import Context
from draft_release.core.inference import (
    calculate_next_version,
    infer_impact_from_pull_requests,
    last_version,
)
from draft_release.core.version import BumpType, Version, branch_prerelease
from draft_release.data.pull_requests import (
    IncomingPullRequests,
    OutgoingPullRequests,
    fetch_pull_requests,
)
from draft_release.data.release import create_draft_release, update_release
from draft_release.data.release_notes import generate_release_notes
from draft_release.data.releases import fetch_releases
from draft_release.forge.models import Release

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NoUpdateResult:
    """Nothing to release: no merged pull requests, or no target branch."""

    last_draft: Release | None
    last_release: Release | None
    last_version: Version | None
    action: Literal["none"] = field(default="none", init=False)


@dataclass(frozen=True, slots=True)
class VersionInferenceResult:
    """Next version of a feature branch; no release was touched."""

    last_release: Release | None
    last_version: Version | None
    pull_request_titles: tuple[str, ...]
    version_increment: BumpType
    version: Version
    action: Literal["version"] = field(default="version", init=False)


@dataclass(frozen=True, slots=True)
class CreatedReleaseResult:
    last_draft: Release | None
    last_release: Release | None
    last_version: Version | None
    pull_request_titles: tuple[str, ...]
    version_increment: BumpType
    version: Version
    release: Release
    action: Literal["created"] = field(default="created", init=False)


@dataclass(frozen=True, slots=True)
class UpdatedReleaseResult:
    last_draft: Release | None
    last_release: Release | None
    last_version: Version | None
    pull_request_titles: tuple[str, ...]
    version_increment: BumpType
    version: Version
    release: Release
    action: Literal["updated"] = field(default="updated", init=False)


ActionResult = NoUpdateResult | VersionInferenceResult | CreatedReleaseResult | UpdatedReleaseResult


async def perform_action(
    ctx: Context,
    default_tag: str,
    *,
    per_page: int | None = None,
    max_pages: int | None = None,
) -> ActionResult:
    """Run the release-branch or feature-branch logic for ``ctx.branch``.

    Args:
        ctx: Invocation context
        default_tag: First version to use when the branch has no release yet
        per_page: Page size for API listings
        max_pages: Number of release pages to search before giving up

    Returns:
        The action taken and the data it was based on
    """
    if ctx.is_release_branch():
        logger.info("Release branch %s: full release management", ctx.branch)
        return await _upsert_draft_release(ctx, default_tag, per_page, max_pages)

    logger.info("Feature branch %s: version inference only", ctx.branch)
    return await _infer_feature_version(ctx, default_tag, per_page, max_pages)


async def _upsert_draft_release(
    ctx: Context,
    default_tag: str,
    per_page: int | None,
    max_pages: int | None,
) -> ActionResult:
    releases = fetch_releases(ctx, per_page, max_pages)

    # Both lookups read the same cached listing; run them one after the other
    last_draft = await releases.find_last_draft(ctx.branch)
    last_release = await releases.find_last(ctx.branch)
    previous_version = last_version(last_release)
    logger.debug("Last draft: %s, last release: %s", _name(last_draft), _name(last_release))

    pull_requests = await fetch_pull_requests(
        ctx,
        IncomingPullRequests(
            base_ref_name=ctx.branch,
            merged_since=last_release.published_at if last_release else None,
            per_page=per_page,
        ),
    ).collect()

    if not pull_requests:
        logger.info("No pull requests merged into %s since the last release", ctx.branch)
        return NoUpdateResult(
            last_draft=last_draft,
            last_release=last_release,
            last_version=previous_version,
        )

    increment = infer_impact_from_pull_requests(pull_requests)
    version = (
        calculate_next_version(last_release, increment, default_tag)
        .with_prerelease(())
        .with_build(ctx.build_metadata)
    )
    titles = tuple(pr.title for pr in pull_requests)
    logger.info("%d pull requests, %s increment, next version %s", len(titles), increment, version)

    if last_draft is not None:
        body = await generate_release_notes(
            ctx,
            version.tag,
            ctx.branch,
            last_release.tag_name if last_release else None,
        )
        release = await update_release(
            ctx,
            replace(last_draft, name=version.tag, tag_name=version.tag, body=body),
        )
        return UpdatedReleaseResult(
            last_draft=last_draft,
            last_release=last_release,
            last_version=previous_version,
            pull_request_titles=titles,
            version_increment=increment,
            version=version,
            release=release,
        )

    release = await create_draft_release(ctx, version.tag, ctx.branch, version.tag)
    return CreatedReleaseResult(
        last_draft=last_draft,
        last_release=last_release,
        last_version=previous_version,
        pull_request_titles=titles,
        version_increment=increment,
        version=version,
        release=release,
    )


async def _infer_feature_version(
    ctx: Context,
    default_tag: str,
    per_page: int | None,
    max_pages: int | None,
) -> ActionResult:
    feature_pr = await fetch_pull_requests(
        ctx, OutgoingPullRequests(head_ref_name=ctx.branch, per_page=per_page)
    ).first()

    if feature_pr is None:
        logger.info("No open pull request from %s; cannot determine a target branch", ctx.branch)
        return NoUpdateResult(last_draft=None, last_release=None, last_version=None)

    target_branch = feature_pr.base_ref_name
    logger.info("Pull request #%d targets %s", feature_pr.number, target_branch)

    last_release = await fetch_releases(ctx, per_page, max_pages).find_last(target_branch)
    merged = await fetch_pull_requests(
        ctx,
        IncomingPullRequests(
            base_ref_name=target_branch,
            merged_since=last_release.published_at if last_release else None,
            per_page=per_page,
        ),
    ).collect()

    pull_requests = [feature_pr, *merged]
    increment = infer_impact_from_pull_requests(pull_requests)
    version = (
        calculate_next_version(last_release, increment, default_tag)
        .with_prerelease(branch_prerelease(ctx.branch))
        .with_build(ctx.build_metadata)
    )
    logger.info("%s increment, next version %s", increment, version)

    return VersionInferenceResult(
        last_release=last_release,
        last_version=last_version(last_release),
        pull_request_titles=tuple(pr.title for pr in pull_requests),
        version_increment=increment,
        version=version,
    )


def _name(release: Release | None) -> str:
    if release is None:
        return "(none)"
    return release.name or release.tag_name or str(release.id)
