"""Rendering of bump results for humans (rich) and machines (JSON)."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tag_track.exceptions import TagCreationFailed

if TYPE_CHECKING:
    from rich.console import Console

    from tag_track.core.bump import BumpReport, VersionBump


class OutputFormat(StrEnum):
    TEXT = "text"
    JSON = "json"


def _str_or_none(value: object | None) -> str | None:
    return None if value is None else str(value)


def bump_to_dict(bump: VersionBump) -> dict[str, Any]:
    return {
        "scope": bump.scope,
        "old_version": _str_or_none(bump.old_version),
        "new_version": _str_or_none(bump.new_version),
        "increment": _str_or_none(bump.increment),
    }


def report_to_dict(report: BumpReport, new_tags: list[str]) -> dict[str, Any]:
    """Build the JSON document consumed by CI integrations."""
    return {
        "tag_created": bool(new_tags),
        "new_tags": new_tags,
        "version_bumps": [bump_to_dict(bump) for bump in report.bumps],
        "skipped_commits": list(report.skipped_commits),
        "error": None,
    }


def error_to_dict(error: Exception) -> dict[str, Any]:
    created = error.created if isinstance(error, TagCreationFailed) else []
    return {
        "tag_created": bool(created),
        "new_tags": created,
        "version_bumps": [],
        "skipped_commits": [],
        "error": str(error),
    }


def render_json(data: dict[str, Any]) -> str:
    return json.dumps(data)


def _tags_panel(names: list[str]) -> Panel:
    return Panel(
        "\n".join(f"[green]{escape(name)}[/]" for name in names),
        title="[green]Tags Created[/]",
        border_style="green",
    )


def render_text(report: BumpReport, new_tags: list[str], console: Console) -> None:
    """Print a human-readable summary of ``report``."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Scope")
    table.add_column("Tag")
    table.add_column("Current")
    table.add_column("Next")
    table.add_column("Increment")

    for bump in report.bumps:
        scope = escape(bump.scope) if bump.scope else "[dim](unscoped)[/]"
        if bump.old_version is None or bump.base_tag is None:
            table.add_row(scope, "[yellow]no tag found[/]", "-", "-", "-")
            continue
        next_version = f"[green]{bump.new_version}[/]" if bump.changed else str(bump.new_version)
        table.add_row(
            scope,
            escape(bump.base_tag.name),
            f"[cyan]{bump.old_version}[/]",
            next_version,
            str(bump.increment) if bump.increment else "[dim]none[/]",
        )

    console.print(table)

    if report.skipped_commits:
        console.print(
            f"\n[yellow]Skipped {len(report.skipped_commits)} commit(s) "
            "not matching the commit pattern:[/]"
        )
        for sha in report.skipped_commits:
            console.print(f"  [dim]{sha}[/]")

    if new_tags:
        console.print(_tags_panel(new_tags))
    elif not report.has_changes:
        console.print("\n[yellow]No version bump required.[/]")


def render_error(error: Exception, console: Console) -> None:
    """Print ``error`` and any tags created before it occurred."""
    console.print(f"[red]Error:[/] {escape(str(error))}")
    if isinstance(error, TagCreationFailed) and error.created:
        console.print(_tags_panel(error.created))
