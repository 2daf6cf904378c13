"""Semantic version parsing and manipulation.

Implements Semantic Versioning 2.0.0: parsing, precedence comparison
and the three increment operations used to apply a version bump.
Incrementing any field clears pre-release and build metadata.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum

# Official SemVer 2.0.0 grammar
SEMVER_PATTERN = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class IncrementKind(StrEnum):
    """Kind of version increment, ordered MAJOR > MINOR > PATCH."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @property
    def severity(self) -> int:
        """Numeric rank used to compare increments."""
        return _SEVERITY[self]

    def is_stronger_than(self, other: IncrementKind | None) -> bool:
        """Return True if this increment outranks ``other`` (None ranks lowest)."""
        return other is None or self.severity > other.severity


_SEVERITY = {
    IncrementKind.PATCH: 1,
    IncrementKind.MINOR: 2,
    IncrementKind.MAJOR: 3,
}


def strongest(first: IncrementKind | None, second: IncrementKind | None) -> IncrementKind | None:
    """Return the stronger of two optional increments."""
    if second is not None and second.is_stronger_than(first):
        return second
    return first


@dataclass(frozen=True, slots=True)
class Version:
    """A semantic version.

    Equality is structural (build metadata included) while ordering
    follows SemVer precedence, which ignores build metadata.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, version_str: str) -> Version:
        """Parse a version string such as ``1.2.3-rc.1+build.5``.

        Raises:
            ValueError: If the string is not a valid semantic version
        """
        match = SEMVER_PATTERN.match(version_str.strip())
        if match is None:
            raise ValueError(f"Invalid semantic version: {version_str!r}")

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    def __str__(self) -> str:
        result = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            result += "-" + ".".join(self.prerelease)
        if self.build:
            result += "+" + ".".join(self.build)
        return result

    def _precedence_key(self) -> tuple:
        # A release outranks any of its pre-releases; numeric identifiers
        # sort below alphanumeric ones.
        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part) for part in self.prerelease
        )
        return (self.major, self.minor, self.patch, not self.prerelease, identifiers)

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() <= other._precedence_key()

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() > other._precedence_key()

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() >= other._precedence_key()

    def bump(self, kind: IncrementKind) -> Version:
        """Return the version incremented by ``kind``."""
        if kind is IncrementKind.MAJOR:
            return increment_major(self)
        if kind is IncrementKind.MINOR:
            return increment_minor(self)
        return increment_patch(self)


def parse_version(version_str: str) -> Version:
    """Parse a version string. See Version.parse()."""
    return Version.parse(version_str)


def increment_patch(version: Version) -> Version:
    """Increment the patch field, clearing pre-release and build metadata."""
    return replace(version, patch=version.patch + 1, prerelease=(), build=())


def increment_minor(version: Version) -> Version:
    """Increment the minor field and reset patch, clearing pre-release and build metadata."""
    return replace(version, minor=version.minor + 1, patch=0, prerelease=(), build=())


def increment_major(version: Version) -> Version:
    """Increment the major field and reset minor and patch, clearing metadata."""
    return replace(
        version,
        major=version.major + 1,
        minor=0,
        patch=0,
        prerelease=(),
        build=(),
    )
