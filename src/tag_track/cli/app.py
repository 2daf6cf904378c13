"""Command line entry point for tag-track."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from tag_track import __version__
from tag_track.cli.commands.bump import run_bump
from tag_track.cli.output import OutputFormat
from tag_track.sources.github import GITHUB_API_URL

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Calculate semantic version bumps from conventional commits.",
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send tag-track logs to stderr through rich."""
    handler = RichHandler(console=err_console, show_path=False, show_time=False)
    package_logger = logging.getLogger("tag_track")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.command()
def bump(
    commit_sha: str | None = typer.Option(
        None,
        "--commit-sha",
        help="Commit to calculate the version bump for. Defaults to the latest commit.",
    ),
    path: str | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Project directory. Defaults to the current directory.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file. Defaults to track.toml or pyproject.toml.",
    ),
    github_repo: str | None = typer.Option(
        None,
        "--github-repo",
        help="GitHub repository (owner/name). Uses the GitHub REST API instead of local git.",
    ),
    github_api_url: str = typer.Option(
        GITHUB_API_URL,
        "--github-api-url",
        envvar="GITHUB_API_URL",
        help="GitHub REST API base URL.",
    ),
    github_token: str | None = typer.Option(
        None,
        "--github-token",
        envvar="GITHUB_TOKEN",
        help="GitHub token used to authorize requests.",
    ),
    create_tag: bool = typer.Option(
        False,
        "--create-tag",
        help="Create a tag for every bumped version.",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--output-format",
        "-o",
        case_sensitive=False,
        help="Output format.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Calculate the next version from the commits since the latest tag."""
    configure_logging(verbose)
    run_bump(
        path=path,
        config_file=config_file,
        commit_sha=commit_sha,
        github_repo=github_repo,
        github_api_url=github_api_url,
        github_token=github_token,
        create_tag=create_tag,
        output_format=output_format,
        console=console,
        err_console=err_console,
    )


def main() -> None:
    app()
