"""Core business logic for tag-track.

This module contains the fundamental building blocks:
- Semantic version parsing and increments
- Commit message and tag name parsing
- Bump rule evaluation
- Correlation of commit history with tags
- Version bump calculation
"""

from __future__ import annotations

from tag_track.core.bump import (
    BumpReport,
    VersionBump,
    calculate_version_bumps,
    create_tags,
    evaluate_references,
    format_tag_name,
)
from tag_track.core.parsing import (
    CommitDetails,
    TagDetails,
    compile_pattern,
    parse_commit_details,
    parse_tag_details,
    require_commit_details,
    require_tag_details,
)
from tag_track.core.references import (
    UNSCOPED,
    Commit,
    RawCommit,
    RawTag,
    Reference,
    ReferenceIterator,
    Tag,
)
from tag_track.core.rules import BumpDecider, decide, rule_matches
from tag_track.core.version import (
    IncrementKind,
    Version,
    increment_major,
    increment_minor,
    increment_patch,
    parse_version,
)

__all__ = [
    "UNSCOPED",
    # Bump calculation
    "BumpDecider",
    "BumpReport",
    # References
    "Commit",
    # Parsing
    "CommitDetails",
    # Version
    "IncrementKind",
    "RawCommit",
    "RawTag",
    "Reference",
    "ReferenceIterator",
    "Tag",
    "TagDetails",
    "Version",
    "VersionBump",
    "calculate_version_bumps",
    "compile_pattern",
    "create_tags",
    "decide",
    "evaluate_references",
    "format_tag_name",
    "increment_major",
    "increment_minor",
    "increment_patch",
    "parse_commit_details",
    "parse_tag_details",
    "parse_version",
    "require_commit_details",
    "require_tag_details",
    "rule_matches",
]
