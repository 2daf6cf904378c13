"""Configuration file discovery and loading.

Looks for configuration in, by order of precedence:

1. ``track.toml``: the whole file is the configuration
2. ``pyproject.toml``: the ``[tool.tag-track]`` table

Both are searched from the given directory upwards. When neither is
found, defaults are used.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tag_track.config.models import TagTrackConfig
from tag_track.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TRACK_TOML = "track.toml"
PYPROJECT_TOML = "pyproject.toml"
TOOL_TABLE = "tag-track"


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest configuration file.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to track.toml, or to a pyproject.toml carrying a
        [tool.tag-track] table, or None if nothing is found
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        track_file = directory / TRACK_TOML
        if track_file.is_file():
            return track_file

        pyproject = directory / PYPROJECT_TOML
        if not pyproject.is_file():
            continue
        try:
            data = load_toml(pyproject)
        except ConfigValidationError as e:
            logger.warning("Ignoring unreadable %s: %s", pyproject, e)
            continue
        if extract_tag_track_config(data):
            return pyproject

    return None


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tag_track_config(data: dict[str, Any]) -> dict[str, Any]:
    """Extract the [tool.tag-track] table from parsed pyproject data."""
    tool = data.get("tool", {})
    if not isinstance(tool, dict):
        return {}
    table = tool.get(TOOL_TABLE, {})
    return table if isinstance(table, dict) else {}


def parse_config(data: dict[str, Any], source: Path | None = None) -> TagTrackConfig:
    """Validate raw configuration data.

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        config = TagTrackConfig.model_validate(data)
    except ValidationError as e:
        where = f" in {source}" if source else ""
        raise ConfigValidationError(f"Invalid configuration{where}:\n{e}") from e

    for index, rule in enumerate(config.bump_rules):
        if not rule.has_predicates:
            logger.warning("Bump rule #%d has no predicates and will never match", index + 1)

    return config


def load_config(path: Path | None = None, config_file: Path | None = None) -> TagTrackConfig:
    """Load tag-track configuration.

    Args:
        path: Directory to search from (defaults to cwd)
        config_file: Explicit configuration file, skips discovery

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If ``config_file`` doesn't exist
        ConfigValidationError: If the configuration is invalid
    """
    if config_file is None:
        config_file = find_config_file(path)
        if config_file is None:
            logger.debug("No configuration file found, using defaults")
            return TagTrackConfig()

    data = load_toml(config_file)
    if config_file.name == PYPROJECT_TOML:
        data = extract_tag_track_config(data)

    logger.debug("Loading configuration from %s", config_file)
    return parse_config(data, source=config_file)
