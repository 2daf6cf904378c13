"""Commit message and tag name parsing.

Both parsers are driven by user-configurable regular expressions that
expose named capture groups:

- commit pattern: ``type`` and ``description`` (required), ``scope`` and
  ``breaking`` (optional)
- tag pattern: ``version`` (required, must be a valid semantic version)
  and ``scope`` (optional)

Groups may be written either as ``(?<name>...)`` or ``(?P<name>...)``.
A text that does not satisfy its pattern yields None rather than an
error, so one malformed commit cannot stop a version calculation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tag_track.core.version import Version
from tag_track.exceptions import InvalidCommitPattern, InvalidRegexPattern, InvalidTagPattern

TYPE_GROUP = "type"
SCOPE_GROUP = "scope"
BREAKING_GROUP = "breaking"
DESCRIPTION_GROUP = "description"
VERSION_GROUP = "version"

BREAKING_CHANGE_MARKERS = ("BREAKING CHANGE", "BREAKING-CHANGE")

# `(?<name>` group openers preceded by an even number of backslashes,
# leaving escaped parentheses and lookbehinds `(?<=` / `(?<!` untouched
_ANGLE_NAMED_GROUP = re.compile(r"(?<!\\)((?:\\\\)*)\(\?<(?=[A-Za-z_])")


@dataclass(frozen=True, slots=True)
class CommitDetails:
    """Sections of a commit message that matched the commit pattern."""

    commit_type: str
    scope: str | None
    breaking: bool
    description: str

    @property
    def mentions_breaking_change(self) -> bool:
        """True if the description contains a BREAKING CHANGE marker."""
        return any(marker in self.description for marker in BREAKING_CHANGE_MARKERS)


@dataclass(frozen=True, slots=True)
class TagDetails:
    """Sections of a tag name that matched the tag pattern."""

    version: Version
    scope: str | None


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a commit or tag pattern.

    Raises:
        InvalidRegexPattern: If the pattern is not a valid regular expression
    """
    if isinstance(pattern, re.Pattern):
        return pattern

    try:
        return re.compile(_ANGLE_NAMED_GROUP.sub(r"\1(?P<", pattern))
    except re.error as e:
        raise InvalidRegexPattern(f"Invalid regex pattern {pattern!r}: {e}") from e


def _group(match: re.Match[str], name: str) -> str | None:
    """Return a named group's text, or None if the group is absent or unmatched."""
    if name not in match.re.groupindex:
        return None
    return match.group(name)


def _clean_scope(raw: str | None) -> str | None:
    if raw is None:
        return None
    scope = raw.replace("(", "").replace(")", "").strip()
    return scope or None


def parse_commit_details(
    message: str,
    pattern: str | re.Pattern[str],
) -> CommitDetails | None:
    """Extract commit details from a commit message.

    Args:
        message: Raw commit message
        pattern: Commit pattern

    Returns:
        Parsed details, or None if the message does not conform to the pattern

    Raises:
        InvalidRegexPattern: If the pattern does not compile
    """
    match = compile_pattern(pattern).search(message)
    if match is None:
        return None

    commit_type = _group(match, TYPE_GROUP)
    description = _group(match, DESCRIPTION_GROUP)
    if commit_type is None or description is None:
        return None

    description = description.strip()
    if not description:
        return None

    return CommitDetails(
        commit_type=commit_type.strip(),
        scope=_clean_scope(_group(match, SCOPE_GROUP)),
        breaking=_group(match, BREAKING_GROUP) is not None,
        description=description,
    )


def parse_tag_details(
    tag_name: str,
    pattern: str | re.Pattern[str],
) -> TagDetails | None:
    """Extract tag details from a tag name.

    Args:
        tag_name: Tag name
        pattern: Tag pattern

    Returns:
        Parsed details, or None if the name does not conform to the pattern
        or the captured version is not a valid semantic version

    Raises:
        InvalidRegexPattern: If the pattern does not compile
    """
    match = compile_pattern(pattern).search(tag_name)
    if match is None:
        return None

    raw_version = _group(match, VERSION_GROUP)
    if raw_version is None:
        return None

    try:
        version = Version.parse(raw_version.strip())
    except ValueError:
        return None

    return TagDetails(version=version, scope=_clean_scope(_group(match, SCOPE_GROUP)))


def require_commit_details(message: str, pattern: str | re.Pattern[str]) -> CommitDetails:
    """Like parse_commit_details(), but a non-conforming message is an error.

    Raises:
        InvalidCommitPattern: If the message does not conform to the pattern
    """
    details = parse_commit_details(message, pattern)
    if details is None:
        summary = message.splitlines()[0] if message else ""
        raise InvalidCommitPattern(
            f"Commit message {summary!r} does not match the commit pattern",
            hint="expected named groups 'type' and a non-empty 'description'",
        )
    return details


def require_tag_details(tag_name: str, pattern: str | re.Pattern[str]) -> TagDetails:
    """Like parse_tag_details(), but a non-conforming tag name is an error.

    Raises:
        InvalidTagPattern: If the tag has no valid version for the pattern
    """
    details = parse_tag_details(tag_name, pattern)
    if details is None:
        raise InvalidTagPattern(
            f"Tag {tag_name!r} does not match the tag pattern",
            hint="expected a named group 'version' holding a semantic version",
        )
    return details
