"""Release notes generated by GitHub.

GitHub only generates notes when a release is created, so notes for an
existing draft have to be requested explicitly and written with the update.
"""

from __future__ import annotations

from draft_release.context import Context


async def generate_release_notes(
    ctx: Context,
    tag_name: str,
    target_commitish: str,
    previous_tag_name: str | None,
) -> str:
    """Generate the release notes body for a release.

    Args:
        ctx: Invocation context
        tag_name: Tag of the release the notes are for
        target_commitish: Branch or commit the tag will point at
        previous_tag_name: Tag to start the notes from; None lets GitHub
            pick the previous release

    Returns:
        The generated Markdown body
    """
    fields: dict[str, str] = {"tag_name": tag_name, "target_commitish": target_commitish}
    if previous_tag_name is not None:
        fields["previous_tag_name"] = previous_tag_name

    data = await ctx.forge.generate_release_notes(ctx.owner, ctx.repo, **fields)
    return str(data.get("body") or "")
