"""Create and update GitHub releases."""

from __future__ import annotations

import logging

from draft_release.context import Context
from draft_release.forge.models import Release

logger = logging.getLogger(__name__)


async def create_draft_release(
    ctx: Context,
    tag_name: str,
    target_commitish: str,
    name: str,
) -> Release:
    """Create a draft release with notes generated by GitHub."""
    data = await ctx.forge.create_release(
        ctx.owner,
        ctx.repo,
        tag_name=tag_name,
        target_commitish=target_commitish,
        name=name,
        draft=True,
        generate_release_notes=True,
    )
    release = Release.from_api(data)
    logger.info("Created draft release %s (id=%d) on %s", name, release.id, target_commitish)
    return release


async def update_release(ctx: Context, release: Release) -> Release:
    """Write the fields of ``release`` back to GitHub.

    Fields that are None are left unchanged on the server.
    """
    fields = {
        "tag_name": release.tag_name,
        "target_commitish": release.target_commitish,
        "name": release.name,
        "body": release.body,
        "draft": release.draft,
        "prerelease": release.prerelease,
    }
    data = await ctx.forge.update_release(
        ctx.owner,
        ctx.repo,
        release.id,
        **{key: value for key, value in fields.items() if value is not None},
    )
    updated = Release.from_api(data)
    logger.info("Updated release %s (id=%d)", updated.name, updated.id)
    return updated
