"""``satlock verify <manifest>``: check a lockfile against its manifest.

The lockfile must be internally consistent, must have been generated from
the current manifest text, and its versions must still satisfy every
requirement, pin, dependency and conflict of the current index.

Exit Codes:
    0: Lockfile is up to date and valid.
    1: Problems found (listed).
    2: Manifest invalid or lockfile unreadable.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from satlock.cli.common import EXIT_INVALID_INPUT, EXIT_OK, EXIT_UNSATISFIABLE, load_or_exit
from satlock.cli.output import console, print_problems
from satlock.core.lockfile import Lockfile
from satlock.exceptions import LockfileError


@click.command("verify")
@click.argument("manifest", type=click.Path(exists=True))
@click.option(
    "--lockfile", "lockfile_path",
    type=click.Path(),
    default=None,
    help="Lockfile to check (default: from settings, next to the manifest).",
)
def verify_command(manifest: str, lockfile_path: str | None) -> None:
    """Verify that the lockfile of MANIFEST is current and consistent."""
    loaded = load_or_exit(manifest)
    path = Path(lockfile_path) if lockfile_path else loaded.lockfile_path
    try:
        lockfile = Lockfile.read(path)
    except LockfileError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        sys.exit(EXIT_INVALID_INPUT)

    problems = lockfile.validate()
    if not lockfile.matches_manifest(loaded.text):
        problems.append("Lockfile is stale: the manifest changed since it was generated")
    problems.extend(
        lockfile.check_installation(loaded.graph, loaded.requirements, loaded.pins)
    )

    print_problems(f"Lockfile {path}", problems)
    sys.exit(EXIT_UNSATISFIABLE if problems else EXIT_OK)
