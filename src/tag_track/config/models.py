"""Configuration models for tag-track.

Configuration lives in ``track.toml`` or under ``[tool.tag-track]`` in
pyproject.toml. Every field has a default, so an empty configuration
calculates unscoped bumps from conventional commits.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tag_track.core.version import IncrementKind

DEFAULT_TAG_PATTERN = r"^v?(?<version>\d+\.\d+\.\d+\S*)$"

DEFAULT_COMMIT_PATTERN = (
    r"^(?<type>[a-zA-Z]*)(?<scope>\(.*\))?(?<breaking>!)?:(?<description>[\s\S]*)$"
)

DEFAULT_TAG_FORMAT = "v{version}"

DEFAULT_TAG_MESSAGE = "Version {version}"


class BumpRule(BaseModel):
    """A predicate-to-increment mapping applied to parsed commits.

    Every predicate that is set must hold for the rule to match; a rule
    with no predicates never matches.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    bump: IncrementKind
    types: list[str] | None = None
    scopes: list[str] | None = None
    if_breaking_field: bool | None = None
    if_breaking_description: bool | None = None

    @field_validator("bump", mode="before")
    @classmethod
    def _normalize_bump(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def has_predicates(self) -> bool:
        return any(
            predicate is not None
            for predicate in (
                self.types,
                self.scopes,
                self.if_breaking_field,
                self.if_breaking_description,
            )
        )


def default_bump_rules() -> list[BumpRule]:
    """Bump rules used when none are configured."""
    return [
        BumpRule(bump=IncrementKind.PATCH, types=["fix", "style"]),
        BumpRule(bump=IncrementKind.MINOR, types=["feat", "refactor", "perf"]),
        BumpRule(bump=IncrementKind.MAJOR, if_breaking_field=True),
        BumpRule(bump=IncrementKind.MAJOR, if_breaking_description=True),
    ]


class TagTrackConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="forbid")

    # Pattern exposing `version` (required) and `scope` (optional)
    tag_pattern: str = DEFAULT_TAG_PATTERN

    # Pattern exposing `type`, `description` (required), `scope` and `breaking`
    commit_pattern: str = DEFAULT_COMMIT_PATTERN

    bump_rules: list[BumpRule] = Field(default_factory=default_bump_rules)

    # Empty means a single, unscoped version
    version_scopes: list[str] = Field(default_factory=list)

    # Templates for created tags; placeholders: {version}, {scope}
    tag_format: str = DEFAULT_TAG_FORMAT
    tag_message: str = DEFAULT_TAG_MESSAGE

    @field_validator("version_scopes")
    @classmethod
    def _dedupe_scopes(cls, value: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for scope in value:
            seen.setdefault(scope.strip(), None)
        return [scope for scope in seen if scope]

    @property
    def is_scoped(self) -> bool:
        """True if more than the single implicit version scope is tracked."""
        return bool(self.version_scopes)
