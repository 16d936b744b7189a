"""Semantic version value type.

Versions follow SemVer 2.0.0. Tags carry a ``v`` prefix (``v1.2.3``), which
parse() accepts and str() drops. A Version is immutable: bump(),
with_prerelease() and with_build() all return new instances.

bump() only touches the core ``major.minor.patch`` triple and carries any
prerelease and build components through unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import StrEnum

from draft_release.exceptions import InvalidVersionError, VersionBumpError

_NUMERIC = r"0|[1-9]\d*"
_ALNUM = r"\d*[a-zA-Z-][0-9a-zA-Z-]*"
_PRERELEASE_ID = rf"(?:{_NUMERIC}|{_ALNUM})"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"^v?(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$"
)

BRANCH_PREFIX = "branch"
MAX_BRANCH_LENGTH = 50
MAX_BRANCH_SEGMENTS = 10


class BumpType(StrEnum):
    """How much a change moves the version."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _BUMP_RANK[self]


_BUMP_RANK = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}


@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version split into core, prerelease and build parts.

    Attributes:
        core: The ``major.minor.patch`` triple as a dotted string
        prerelease: Prerelease identifiers, in order
        build: Build metadata identifiers, in order
    """

    core: str
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string, with or without a leading ``v``.

        Raises:
            InvalidVersionError: If the text is not a strict semantic version
        """
        match = SEMVER_PATTERN.fullmatch(text) if text else None
        if match is None:
            raise InvalidVersionError(text)

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            core=f"{match.group('major')}.{match.group('minor')}.{match.group('patch')}",
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def major(self) -> int:
        return self._parts()[0]

    @property
    def minor(self) -> int:
        return self._parts()[1]

    @property
    def patch(self) -> int:
        return self._parts()[2]

    @property
    def tag(self) -> str:
        """Release tag name: ``v`` plus the core version only."""
        return f"v{self.core}"

    def _parts(self) -> tuple[int, int, int]:
        try:
            major, minor, patch = (int(part) for part in self.core.split("."))
        except ValueError as e:
            raise VersionBumpError(f"Malformed version core: {self.core!r}") from e
        return major, minor, patch

    def bump(self, bump_type: BumpType) -> Version:
        """Return a new version with the core incremented.

        Prerelease and build components are carried over unchanged.
        """
        if bump_type == BumpType.NONE:
            return replace(self)

        major, minor, patch = self._parts()
        match bump_type:
            case BumpType.MAJOR:
                core = f"{major + 1}.0.0"
            case BumpType.MINOR:
                core = f"{major}.{minor + 1}.0"
            case BumpType.PATCH:
                core = f"{major}.{minor}.{patch + 1}"
            case _:
                raise VersionBumpError(f"Unexpected bump type: {bump_type!r}")
        return replace(self, core=core)

    def with_prerelease(self, components: Iterable[str]) -> Version:
        return replace(self, prerelease=tuple(components))

    def with_build(self, components: Iterable[str]) -> Version:
        return replace(self, build=tuple(components))

    def __str__(self) -> str:
        result = self.core
        if self.prerelease:
            result += "-" + ".".join(self.prerelease)
        if self.build:
            result += "+" + ".".join(self.build)
        return result


def parse_version(text: str) -> Version:
    """Parse a version string. See Version.parse()."""
    return Version.parse(text)


def branch_prerelease(branch: str) -> tuple[str, ...]:
    """Turn a branch name into semver-legal prerelease identifiers.

    The result always starts with ``branch`` so that feature-branch versions
    sort below numeric prereleases of the same core.

    Examples:
        >>> branch_prerelease("fix/some.thing/else")
        ('branch', 'fix', 'some', 'thing', 'else')
        >>> branch_prerelease("")
        ('branch',)
    """
    name = branch[:MAX_BRANCH_LENGTH].replace("/", ".")
    name = re.sub(r"[^0-9A-Za-z.-]+", "-", name)
    name = re.sub(r"\.{2,}", ".", name)
    name = re.sub(r"-{2,}", "-", name)

    segments: list[str] = []
    for segment in name.split("."):
        segment = segment.strip("-")
        # Numeric identifiers must not have leading zeros, but a lone 0 is fine
        if segment.isdigit():
            segment = segment.lstrip("0") or "0"
        if segment:
            segments.append(segment)

    return (BRANCH_PREFIX, *segments[:MAX_BRANCH_SEGMENTS])
