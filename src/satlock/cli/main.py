"""satlock CLI: SAT-based dependency resolution and lockfiles.

Entry point for the ``satlock`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve: Resolve a manifest and show the selected versions.
    lock:    Resolve a manifest and write satlock-lock.json.
    verify:  Check a lockfile against its manifest.

Usage::

    satlock resolve ./my-project
    satlock resolve satlock.yaml --json
    satlock lock ./my-project -o build/satlock-lock.json
    satlock -v verify ./my-project
"""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from satlock import __version__
from satlock.cli.lock import lock_command
from satlock.cli.resolve_cmd import resolve_command
from satlock.cli.verify import verify_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    count=True,
    help="Log progress (-v) or every solver step (-vv) to stderr.",
)
def cli(verbose: int) -> None:
    """satlock: SAT-based dependency resolution for package managers.

    Resolve a project's requirements to exactly one version per package,
    explain conflicts when no such set exists, and keep a lockfile of the
    result.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(lock_command)
cli.add_command(verify_command)
