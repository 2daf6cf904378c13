"""Version bump calculation.

Drives a source's reference iterator, folds commit decisions per
version scope and applies the resulting increment to the version of
the closest tag of each scope.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tag_track.core.parsing import require_tag_details
from tag_track.core.references import UNSCOPED, Reference, Tag, scope_key
from tag_track.core.rules import BumpDecider
from tag_track.exceptions import (
    ConfigValidationError,
    InvalidTagPattern,
    SourceError,
    TagCreationFailed,
)

if TYPE_CHECKING:
    from tag_track.config.models import TagTrackConfig
    from tag_track.core.version import IncrementKind, Version
    from tag_track.sources.base import Source

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VersionBump:
    """Outcome of the calculation for one version scope."""

    scope: str
    old_version: Version | None
    new_version: Version | None
    increment: IncrementKind | None
    base_tag: Tag | None = None

    @property
    def changed(self) -> bool:
        return self.increment is not None


@dataclass(frozen=True, slots=True)
class BumpReport:
    """Bumps for every tracked scope plus commits that could not be parsed."""

    bumps: tuple[VersionBump, ...]
    skipped_commits: tuple[str, ...] = ()

    @property
    def has_changes(self) -> bool:
        return any(bump.changed for bump in self.bumps)


def calculate_version_bumps(source: Source, sha: str, config: TagTrackConfig) -> BumpReport:
    """Calculate the version bump of every tracked scope at ``sha``.

    Args:
        source: Source of commits and tags
        sha: Commit the bump is calculated for
        config: Configuration

    Returns:
        Bump report

    Raises:
        MissingGitTags: If the source has no tags
        InvalidRegexPattern: If a configured pattern does not compile
        SourceError: On transport failures, unchanged
    """
    logger.debug("Calculating version bumps from %s", sha)
    return evaluate_references(source.get_reference_iterator(sha), config)


def evaluate_references(references: Iterable[Reference], config: TagTrackConfig) -> BumpReport:
    """Fold a stream of references into a bump report."""
    scoped = config.is_scoped
    scopes = config.version_scopes or [UNSCOPED]
    decider = BumpDecider(config.bump_rules)
    base_tags: dict[str, Tag] = {}
    skipped: list[str] = []

    for reference in references:
        for tag in reference.tags:
            if tag.details is not None:
                base_tags.setdefault(scope_key(tag.details.scope, scoped=scoped), tag)

        commit = reference.commit
        if commit is None:
            continue

        if commit.details is None:
            logger.info("Skipping commit %s: %r", commit.short_sha, commit.summary)
            skipped.append(commit.sha)
            continue

        scope = scope_key(commit.details.scope, scoped=scoped)
        if scope in base_tags or decider.is_settled(scope):
            continue
        decider.feed(scope, commit.details)

    bumps: list[VersionBump] = []
    for scope in scopes:
        tag = base_tags.get(scope)
        if tag is None or tag.details is None:
            logger.warning("No tag found for version scope %r, version left unchanged", scope)
            bumps.append(
                VersionBump(scope=scope, old_version=None, new_version=None, increment=None)
            )
            continue

        old_version = tag.details.version
        increment = decider.decision(scope)
        new_version = old_version.bump(increment) if increment else old_version
        logger.debug("Scope %r: %s -> %s (%s)", scope, old_version, new_version, increment)
        bumps.append(
            VersionBump(
                scope=scope,
                old_version=old_version,
                new_version=new_version,
                increment=increment,
                base_tag=tag,
            )
        )

    return BumpReport(bumps=tuple(bumps), skipped_commits=tuple(skipped))


def _render(template: str, bump: VersionBump, field: str) -> str:
    try:
        return template.format(version=bump.new_version, scope=bump.scope)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigValidationError(
            f"Invalid {field} template {template!r}: {e}",
            hint="available placeholders are {version} and {scope}",
        ) from e


def format_tag_name(config: TagTrackConfig, bump: VersionBump) -> str:
    """Render the name of the tag for ``bump``.

    The rendered name must parse back to the same version and scope.

    Raises:
        ConfigValidationError: If the tag format template is invalid
        InvalidTagPattern: If the name does not round-trip through the tag pattern
    """
    name = _render(config.tag_format, bump, "tag_format")
    details = require_tag_details(name, config.tag_pattern)

    if details.version != bump.new_version or (
        config.is_scoped and scope_key(details.scope, scoped=True) != bump.scope
    ):
        raise InvalidTagPattern(
            f"Tag {name!r} parses as {details.version} (scope {details.scope!r}), "
            f"expected {bump.new_version} (scope {bump.scope!r})",
            hint="make tag_format agree with tag_pattern",
        )
    return name


def create_tags(
    source: Source,
    sha: str,
    config: TagTrackConfig,
    report: BumpReport,
) -> list[str]:
    """Create a tag at ``sha`` for every scope whose version changed.

    Every tag name and message is rendered and checked before the first
    tag is created.

    Returns:
        Names of the created tags

    Raises:
        ConfigValidationError: If a template is invalid
        InvalidTagPattern: If a tag name does not round-trip through the tag pattern
        TagCreationFailed: If the source fails to create a tag
    """
    planned = [
        (format_tag_name(config, bump), _render(config.tag_message, bump, "tag_message"))
        for bump in report.bumps
        if bump.changed
    ]

    created: list[str] = []
    for name, message in planned:
        try:
            source.create_tag(name, message, sha)
        except SourceError as e:
            raise TagCreationFailed(f"Failed to create tag {name}: {e}", created=created) from e
        logger.info("Created tag %s at %s", name, sha[:7])
        created.append(name)

    return created
