"""``satlock resolve <manifest>``: resolve and display the package set.

Exit Codes:
    0: Resolution succeeded.
    1: Requirements are unsatisfiable (conflict set printed).
    2: Malformed manifest or requirement.
    3: Decision budget exhausted.
"""

from __future__ import annotations

import sys

import click

from satlock.cli.common import exit_code_for, load_or_exit, resolve_manifest
from satlock.cli.output import print_json, print_resolution, resolution_as_dict


@click.command("resolve")
@click.argument("manifest", type=click.Path(exists=True))
@click.option(
    "--max-decisions",
    type=click.IntRange(min=0),
    default=None,
    help="Give up after this many solver decisions.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def resolve_command(manifest: str, max_decisions: int | None, as_json: bool) -> None:
    """Resolve the requirements of MANIFEST to one version per package.

    MANIFEST is a satlock.yaml file or a directory containing one.
    """
    loaded = load_or_exit(manifest)
    overrides = {} if max_decisions is None else {"max_decisions": max_decisions}
    resolution = resolve_manifest(loaded, overrides)

    if as_json:
        print_json(resolution_as_dict(resolution))
    else:
        print_resolution(resolution)
    sys.exit(exit_code_for(resolution))
