"""Tests for semantic version parsing and increments."""

from __future__ import annotations

import pytest

from tag_track.core.version import (
    IncrementKind,
    Version,
    increment_major,
    increment_minor,
    increment_patch,
    parse_version,
    strongest,
)


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_parse_simple(self):
        """Parse a plain release version."""
        v = Version.parse("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease == ()
        assert v.build == ()

    def test_parse_prerelease_and_build(self):
        """Parse pre-release and build metadata."""
        v = parse_version("2.0.0-rc.1+build.42")
        assert v.prerelease == ("rc", "1")
        assert v.build == ("build", "42")

    def test_str_roundtrip(self):
        """String form matches the parsed input."""
        assert str(Version.parse("1.0.0-alpha.beta+exp.sha.5114f85")) == (
            "1.0.0-alpha.beta+exp.sha.5114f85"
        )

    @pytest.mark.parametrize("value", ["1.2", "v1.2.3", "01.2.3", "1.2.3-", "1.2.3-01", "abc"])
    def test_invalid_versions_raise(self, value: str):
        """Strings that are not semantic versions raise ValueError."""
        with pytest.raises(ValueError, match="Invalid semantic version"):
            Version.parse(value)


class TestVersionOrdering:
    """Tests for SemVer precedence."""

    def test_release_outranks_prerelease(self):
        """1.0.0 > 1.0.0-rc.1."""
        assert Version.parse("1.0.0") > Version.parse("1.0.0-rc.1")

    def test_prerelease_chain(self):
        """Precedence example from semver.org."""
        chain = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        versions = [Version.parse(v) for v in chain]
        assert sorted(reversed(versions)) == versions

    def test_build_metadata_ignored_for_precedence(self):
        """Build metadata does not make a version greater."""
        a = Version.parse("1.0.0+a")
        b = Version.parse("1.0.0+b")
        assert not a > b
        assert not b > a
        assert a != b

    def test_numeric_fields_compare_numerically(self):
        """1.10.0 > 1.9.0."""
        assert Version.parse("1.10.0") > Version.parse("1.9.0")


class TestIncrements:
    """Tests for the increment operations."""

    def test_increment_patch_twice(self):
        """Two patch increments add two and clear metadata both times."""
        v = Version.parse("1.2.3-rc.1+build.7")
        once = increment_patch(v)
        twice = increment_patch(once)

        assert once.patch == 4
        assert once.prerelease == () and once.build == ()
        assert twice.patch == 5
        assert twice.prerelease == () and twice.build == ()

    def test_increment_minor_clears_prerelease(self):
        """Minor increment resets patch and clears the pre-release."""
        v = increment_minor(Version.parse("1.2.3-beta"))
        assert str(v) == "1.3.0"

    def test_increment_major(self):
        """Major increment resets minor and patch."""
        assert str(increment_major(Version.parse("1.2.3+meta"))) == "2.0.0"

    def test_increments_do_not_mutate(self):
        """Increments return new values."""
        v = Version(1, 2, 3)
        increment_major(v)
        assert v == Version(1, 2, 3)

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (IncrementKind.MAJOR, "2.0.0"),
            (IncrementKind.MINOR, "1.3.0"),
            (IncrementKind.PATCH, "1.2.4"),
        ],
    )
    def test_bump_dispatch(self, kind: IncrementKind, expected: str):
        """Version.bump() applies the matching increment."""
        assert str(Version(1, 2, 3).bump(kind)) == expected


class TestIncrementKind:
    """Tests for IncrementKind ordering."""

    def test_severity_order(self):
        """MAJOR > MINOR > PATCH."""
        assert IncrementKind.MAJOR.is_stronger_than(IncrementKind.MINOR)
        assert IncrementKind.MINOR.is_stronger_than(IncrementKind.PATCH)
        assert not IncrementKind.PATCH.is_stronger_than(IncrementKind.MINOR)
        assert IncrementKind.PATCH.is_stronger_than(None)

    def test_strongest(self):
        """strongest() keeps the higher increment and ignores None."""
        assert strongest(None, IncrementKind.PATCH) is IncrementKind.PATCH
        assert strongest(IncrementKind.MINOR, IncrementKind.PATCH) is IncrementKind.MINOR
        assert strongest(IncrementKind.MINOR, None) is IncrementKind.MINOR
        assert strongest(None, None) is None

    def test_values(self):
        """Increment kinds serialize as lowercase names."""
        assert str(IncrementKind.MAJOR) == "major"
        assert IncrementKind("minor") is IncrementKind.MINOR
