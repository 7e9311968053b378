"""Rich output formatting helpers for the satlock CLI.

Provides consistent, colored terminal output for resolution results,
conflict diagnoses, configuration errors, and lockfile checks.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from satlock.core.dependency import Resolution, ResolutionStatus
from satlock.exceptions import ConfigError

_STATUS_STYLES: dict[ResolutionStatus, str] = {
    ResolutionStatus.SATISFIED: "bold green",
    ResolutionStatus.UNSATISFIABLE: "bold red",
    ResolutionStatus.MALFORMED_CONSTRAINT: "bold red",
    ResolutionStatus.CANCELLED: "yellow",
}

_STATUS_TITLES: dict[ResolutionStatus, str] = {
    ResolutionStatus.SATISFIED: "Resolution successful",
    ResolutionStatus.UNSATISFIABLE: "Resolution failed: requirements conflict",
    ResolutionStatus.MALFORMED_CONSTRAINT: "Resolution failed: malformed requirement",
    ResolutionStatus.CANCELLED: "Resolution cancelled",
}

console = Console()


def status_style(status: ResolutionStatus) -> str:
    """Return the Rich style string for a resolution status."""
    return _STATUS_STYLES.get(status, "white")


def print_resolution(resolution: Resolution) -> None:
    """Print dependency resolution results.

    Args:
        resolution: The resolver outcome.
    """
    style = status_style(resolution.status)
    console.print(
        Panel(f"[{style}]{_STATUS_TITLES[resolution.status]}[/{style}]",
              title="Dependency Resolution")
    )
    if resolution.success:
        if resolution.installed:
            table = Table(show_header=True)
            table.add_column("Package", style="bold")
            table.add_column("Resolved Version")
            for name in sorted(resolution.installed):
                table.add_row(name, resolution.installed[name])
            console.print(table)
        else:
            console.print("[dim]No packages to install.[/dim]")
    else:
        if resolution.conflict_set is not None:
            console.print("These constraints cannot hold together:")
        for conflict in resolution.conflicts:
            console.print(f"  [red]- {escape(conflict)}[/red]")

    if resolution.stats:
        parts = [f"{value} {name}" for name, value in resolution.stats.items()]
        console.print(f"[dim]{' | '.join(parts)}[/dim]")


def resolution_as_dict(resolution: Resolution) -> dict[str, Any]:
    """Return a JSON-serializable summary of a resolution."""
    return {
        "status": resolution.status.value,
        "installed": dict(sorted(resolution.installed.items())),
        "conflicts": list(resolution.conflicts),
        "stats": dict(resolution.stats),
    }


def print_config_error(error: ConfigError) -> None:
    """Print every issue of a configuration error."""
    console.print(
        Panel(f"[bold red]{len(error.issues)} configuration problem(s)[/bold red]",
              title="Manifest")
    )
    for issue in error.issues:
        console.print(f"  [red]- {escape(str(issue))}[/red]")


def print_problems(title: str, problems: list[str]) -> None:
    """Print a titled list of problems, or a success panel if empty."""
    if not problems:
        console.print(Panel(f"[bold green]{escape(title)}: OK[/bold green]"))
        return
    console.print(Panel(f"[bold red]{escape(title)}: {len(problems)} problem(s)[/bold red]"))
    for problem in problems:
        console.print(f"  [red]- {escape(problem)}[/red]")


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    console.print_json(json.dumps(data, default=str))
