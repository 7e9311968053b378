"""``satlock lock <manifest>``: resolve and write the lockfile.

Exit Codes:
    0: Lockfile written.
    1: Requirements are unsatisfiable; nothing written.
    2: Malformed manifest or requirement; nothing written.
    3: Decision budget exhausted; nothing written.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from satlock.cli.common import EXIT_OK, exit_code_for, load_or_exit, resolve_manifest
from satlock.cli.output import print_resolution
from satlock.core.lockfile import Lockfile


@click.command("lock")
@click.argument("manifest", type=click.Path(exists=True))
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Output path for the lockfile (default: from settings, next to the manifest).",
)
@click.option(
    "--max-decisions",
    type=click.IntRange(min=0),
    default=None,
    help="Give up after this many solver decisions.",
)
def lock_command(manifest: str, output: str | None, max_decisions: int | None) -> None:
    """Resolve MANIFEST and write a deterministic lockfile.

    The lockfile is only written when resolution succeeds.
    """
    loaded = load_or_exit(manifest)
    overrides = {} if max_decisions is None else {"max_decisions": max_decisions}
    resolution = resolve_manifest(loaded, overrides)
    print_resolution(resolution)
    if not resolution.success:
        sys.exit(exit_code_for(resolution))

    lockfile = Lockfile.from_resolution(
        resolution, loaded.graph, root=loaded.name, manifest_text=loaded.text,
    )
    out_path = Path(output) if output else loaded.lockfile_path
    lockfile.write(out_path)
    click.echo(f"\nLockfile written to: {out_path}")
    sys.exit(EXIT_OK)
