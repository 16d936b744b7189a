"""Version inference from pull requests and the last release."""

from __future__ import annotations

from collections.abc import Iterable

from draft_release.core.commits import max_impact, message_impact
from draft_release.core.version import BumpType, Version
from draft_release.forge.models import PullRequest, Release


def infer_impact_from_pull_requests(pull_requests: Iterable[PullRequest]) -> BumpType:
    """Return the largest impact among the pull request titles."""
    return max_impact(message_impact(pr.title) for pr in pull_requests)


def last_version(release: Release | None) -> Version | None:
    """Parse the version of a published release from its tag."""
    if release is None or release.tag_name is None:
        return None
    return Version.parse(release.tag_name)


def calculate_next_version(
    last_release: Release | None,
    bump_type: BumpType,
    default_tag: str,
) -> Version:
    """Compute the next version after ``last_release``.

    Without a previous release the default tag is the first version and is
    used as is; otherwise the last release's tag is bumped.

    Raises:
        InvalidVersionError: If the last tag or the default tag is not a version
    """
    previous = last_version(last_release)
    if previous is None:
        return Version.parse(default_tag)
    return previous.bump(bump_type)
