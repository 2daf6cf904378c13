"""Configuration management for tag-track."""

from __future__ import annotations

from tag_track.config.loader import load_config
from tag_track.config.models import (
    DEFAULT_COMMIT_PATTERN,
    DEFAULT_TAG_PATTERN,
    BumpRule,
    TagTrackConfig,
    default_bump_rules,
)

__all__ = [
    "DEFAULT_COMMIT_PATTERN",
    "DEFAULT_TAG_PATTERN",
    "BumpRule",
    "TagTrackConfig",
    "default_bump_rules",
    "load_config",
]
