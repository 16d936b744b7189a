"""Conventional commit classification.

Pull request titles are expected to follow the conventional commit format::

    type(scope)!: description

- A ``!`` before the colon, or a ``BREAKING CHANGE:`` footer, is a major change
- ``feat`` is a minor change
- ``fix`` is a patch change
- Anything else (chore, docs, refactor, ...) does not affect the version

Types are matched case-sensitively; ``Feat:`` is not a feature.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from draft_release.core.version import BumpType

BREAKING_MARKERS = ("BREAKING CHANGE:", "BREAKING-CHANGE:")

CONVENTIONAL_COMMIT_PATTERN = re.compile(
    r"^(?P<type>[a-z]+)(?P<scope>\([^)]*\))?(?P<breaking>!)?:\s*\S+"
)


def message_impact(message: str) -> BumpType:
    """Classify a commit message or pull request title.

    Args:
        message: Free text; only the first line is parsed for the type

    Returns:
        The version impact of the message
    """
    if not message or not message.strip():
        return BumpType.NONE

    if any(marker in message for marker in BREAKING_MARKERS):
        return BumpType.MAJOR

    first_line = message.split("\n", 1)[0].strip()
    match = CONVENTIONAL_COMMIT_PATTERN.match(first_line)
    if match is None:
        return BumpType.NONE

    if match.group("breaking"):
        return BumpType.MAJOR
    if match.group("type") == "feat":
        return BumpType.MINOR
    if match.group("type") == "fix":
        return BumpType.PATCH
    return BumpType.NONE


def max_impact(impacts: Iterable[BumpType]) -> BumpType:
    """Reduce impacts to the largest one, stopping early at MAJOR."""
    current = BumpType.NONE
    for impact in impacts:
        if impact == BumpType.MAJOR:
            return BumpType.MAJOR
        if impact.rank > current.rank:
            current = impact
    return current
