"""Shared helpers for satlock subcommands: loading and resolving."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from satlock.cli.output import print_config_error
from satlock.config import Manifest, load_manifest
from satlock.core.dependency import DependencyResolver, Resolution, ResolutionStatus
from satlock.exceptions import ConfigError

EXIT_OK = 0
EXIT_UNSATISFIABLE = 1
EXIT_INVALID_INPUT = 2
EXIT_CANCELLED = 3

_EXIT_CODES: dict[ResolutionStatus, int] = {
    ResolutionStatus.SATISFIED: EXIT_OK,
    ResolutionStatus.UNSATISFIABLE: EXIT_UNSATISFIABLE,
    ResolutionStatus.MALFORMED_CONSTRAINT: EXIT_INVALID_INPUT,
    ResolutionStatus.CANCELLED: EXIT_CANCELLED,
}


def exit_code_for(resolution: Resolution) -> int:
    return _EXIT_CODES[resolution.status]


def load_or_exit(path: str) -> Manifest:
    """Load a manifest, printing its problems and exiting with 2 if invalid."""
    try:
        return load_manifest(Path(path))
    except ConfigError as exc:
        print_config_error(exc)
        sys.exit(EXIT_INVALID_INPUT)


def resolve_manifest(manifest: Manifest, overrides: dict[str, Any] | None = None) -> Resolution:
    """Resolve a manifest with command-line setting overrides applied.

    Args:
        manifest: The loaded manifest.
        overrides: Settings given on the command line. Only keys the user
            actually passed belong here.
    """
    settings = manifest.settings.overlay(overrides)
    resolver = DependencyResolver(
        manifest.graph,
        manifest.requirements,
        pins=manifest.pins,
        max_decisions=settings.max_decisions,
    )
    return resolver.resolve()
