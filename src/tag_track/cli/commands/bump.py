"""Implementation of the bump calculation command.

Calculates the next version of every tracked scope and, optionally,
creates the corresponding tags.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from tag_track.cli.output import (
    OutputFormat,
    error_to_dict,
    render_error,
    render_json,
    render_text,
    report_to_dict,
)
from tag_track.config import load_config
from tag_track.core.bump import calculate_version_bumps, create_tags
from tag_track.exceptions import TagTrackError
from tag_track.sources import GitSource, GithubSource

if TYPE_CHECKING:
    from rich.console import Console

    from tag_track.config.models import TagTrackConfig
    from tag_track.sources import Source

logger = logging.getLogger(__name__)


def build_source(
    config: TagTrackConfig,
    project_path: Path,
    github_repo: str | None,
    github_api_url: str,
    github_token: str | None,
) -> Source:
    """Select the GitHub source when a repository is given, else local git."""
    if github_repo:
        logger.debug("Using GitHub source for %s (%s)", github_repo, github_api_url)
        return GithubSource(config, github_repo, api_url=github_api_url, token=github_token)

    logger.debug("Using git source at %s", project_path)
    source = GitSource(config, project_path)
    source.verify()
    return source


def run_bump(
    path: str | None,
    config_file: str | None,
    commit_sha: str | None,
    github_repo: str | None,
    github_api_url: str,
    github_token: str | None,
    create_tag: bool,
    output_format: OutputFormat,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bump command.

    Args:
        path: Optional path to the project directory
        config_file: Optional explicit configuration file
        commit_sha: Commit to calculate the bump for (defaults to the latest)
        github_repo: GitHub repository ``owner/name``; selects the GitHub source
        github_api_url: GitHub REST API base URL
        github_token: GitHub token
        create_tag: Whether to create tags for bumped versions
        output_format: Text or JSON output
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()
    source: Source | None = None

    try:
        config = load_config(project_path, Path(config_file) if config_file else None)
        source = build_source(config, project_path, github_repo, github_api_url, github_token)

        sha = commit_sha or source.get_latest_commit_sha()
        report = calculate_version_bumps(source, sha, config)
        new_tags = create_tags(source, sha, config, report) if create_tag else []
    except TagTrackError as e:
        logger.debug("Bump calculation failed", exc_info=True)
        if output_format is OutputFormat.JSON:
            typer.echo(render_json(error_to_dict(e)))
        else:
            render_error(e, err_console)
        raise SystemExit(1) from e
    finally:
        if isinstance(source, GithubSource):
            source.close()

    if output_format is OutputFormat.JSON:
        typer.echo(render_json(report_to_dict(report, new_tags)))
        return

    render_text(report, new_tags, console)
    if create_tag and not new_tags:
        console.print("[dim]No tags created.[/]")
