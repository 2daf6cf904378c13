"""Tests for commit message and tag name parsing."""

from __future__ import annotations

import pytest

from tag_track.config.models import DEFAULT_COMMIT_PATTERN, DEFAULT_TAG_PATTERN
from tag_track.core.parsing import (
    compile_pattern,
    parse_commit_details,
    parse_tag_details,
    require_commit_details,
    require_tag_details,
)
from tag_track.core.version import Version
from tag_track.exceptions import InvalidCommitPattern, InvalidRegexPattern, InvalidTagPattern


class TestCompilePattern:
    """Tests for compile_pattern()."""

    def test_angle_bracket_groups(self):
        """(?<name>...) groups are accepted."""
        pattern = compile_pattern(r"v(?<version>.*)")
        assert "version" in pattern.groupindex

    def test_python_groups(self):
        """(?P<name>...) groups are accepted."""
        pattern = compile_pattern(r"v(?P<version>.*)")
        assert "version" in pattern.groupindex

    def test_lookbehind_untouched(self):
        """Lookbehind assertions are not mistaken for named groups."""
        pattern = compile_pattern(r"(?<=v)(?<version>\d+)(?<!x)")
        assert pattern.search("v12").group("version") == "12"

    def test_group_after_escaped_backslash(self):
        """A group following a literal backslash is still a named group."""
        pattern = compile_pattern(r"\\(?<version>\d+)")
        assert pattern.search("\\12").group("version") == "12"

    def test_escaped_parenthesis_untouched(self):
        """An escaped parenthesis is not turned into a group."""
        pattern = compile_pattern(r"\(?<x")
        assert pattern.search("<x") is not None
        assert not pattern.groupindex

    def test_invalid_pattern_raises(self):
        """A pattern that does not compile raises InvalidRegexPattern."""
        with pytest.raises(InvalidRegexPattern, match="Invalid regex pattern"):
            compile_pattern(r"(?<type>[a-z")


class TestParseCommitDetails:
    """Tests for parse_commit_details()."""

    def test_parse_with_scope(self):
        """feat(api): add x parses type, scope and description."""
        details = parse_commit_details("feat(api): add x", DEFAULT_COMMIT_PATTERN)

        assert details is not None
        assert details.commit_type == "feat"
        assert details.scope == "api"
        assert details.breaking is False
        assert details.description == "add x"

    def test_parse_without_scope(self):
        """Scope defaults to None."""
        details = parse_commit_details("fix: handle null", DEFAULT_COMMIT_PATTERN)

        assert details is not None
        assert details.scope is None

    def test_parse_breaking_indicator(self):
        """The ! indicator sets the breaking flag."""
        details = parse_commit_details("feat(core)!: breaking", DEFAULT_COMMIT_PATTERN)

        assert details is not None
        assert details.breaking is True
        assert details.scope == "core"

    def test_description_includes_body(self):
        """The default pattern captures the whole message as description."""
        details = parse_commit_details(
            "feat: new api\n\nBREAKING CHANGE: old api removed", DEFAULT_COMMIT_PATTERN
        )

        assert details is not None
        assert details.mentions_breaking_change
        assert not details.breaking

    def test_breaking_change_hyphenated(self):
        """BREAKING-CHANGE is also recognized."""
        details = parse_commit_details("fix: x\n\nBREAKING-CHANGE: y", DEFAULT_COMMIT_PATTERN)

        assert details is not None
        assert details.mentions_breaking_change

    def test_non_conventional_message(self):
        """A message not matching the pattern yields None."""
        assert parse_commit_details("Updated the readme file", DEFAULT_COMMIT_PATTERN) is None

    def test_empty_description(self):
        """An empty description is a failed parse."""
        assert parse_commit_details("feat:   ", DEFAULT_COMMIT_PATTERN) is None

    def test_missing_required_group(self):
        """A pattern without a description group never parses."""
        assert parse_commit_details("feat: x", r"^(?<type>\w+):") is None

    def test_optional_groups_absent_from_pattern(self):
        """Scope and breaking default when the pattern lacks them."""
        details = parse_commit_details("feat: x", r"^(?<type>\w+): (?<description>.+)$")

        assert details is not None
        assert details.scope is None
        assert details.breaking is False

    def test_invalid_pattern_raises(self):
        """An invalid pattern is an error, not a failed parse."""
        with pytest.raises(InvalidRegexPattern):
            parse_commit_details("feat: x", "(")


class TestParseTagDetails:
    """Tests for parse_tag_details()."""

    def test_parse_prefixed_tag(self):
        """v(?<version>.*) extracts the version."""
        details = parse_tag_details("v1.2.3", r"v(?<version>.*)")

        assert details is not None
        assert details.version == Version(1, 2, 3)
        assert details.scope is None

    def test_default_pattern(self):
        """The default pattern accepts tags with or without a v prefix."""
        assert parse_tag_details("1.0.0", DEFAULT_TAG_PATTERN) is not None
        assert parse_tag_details("v2.0.0-rc.1", DEFAULT_TAG_PATTERN) is not None
        assert parse_tag_details("release-candidate", DEFAULT_TAG_PATTERN) is None

    def test_parse_scoped_tag(self):
        """The scope group is extracted."""
        details = parse_tag_details("api/v0.3.0", r"^(?<scope>[a-z]+)/v(?<version>.+)$")

        assert details is not None
        assert details.scope == "api"
        assert str(details.version) == "0.3.0"

    def test_invalid_version(self):
        """A captured version that is not semver is a failed parse."""
        assert parse_tag_details("vnext", r"v(?<version>.*)") is None

    def test_missing_version_group(self):
        """A pattern without a version group never parses."""
        assert parse_tag_details("v1.2.3", r"v(.*)") is None


class TestStrictParsing:
    """Tests for require_commit_details() and require_tag_details()."""

    def test_require_commit_details_raises(self):
        """A non-conforming commit is an error in strict mode."""
        with pytest.raises(InvalidCommitPattern, match="Oops"):
            require_commit_details("Oops\n\nmore text", DEFAULT_COMMIT_PATTERN)

    def test_require_commit_details_returns(self):
        """A conforming commit returns its details."""
        assert require_commit_details("fix: y", DEFAULT_COMMIT_PATTERN).commit_type == "fix"

    def test_require_tag_details_raises(self):
        """A tag without a valid version is an error in strict mode."""
        with pytest.raises(InvalidTagPattern, match="latest"):
            require_tag_details("latest", DEFAULT_TAG_PATTERN)
