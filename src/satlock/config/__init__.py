"""Project manifest, manifest interpreter, and settings overlay."""

from satlock.config.interpreter import ConfigIssue, Interpreter, interpret
from satlock.config.manifest import (
    MANIFEST_FILENAME,
    Manifest,
    build_graph,
    load_manifest,
)
from satlock.config.settings import DEFAULT_LOCKFILE, Settings

__all__ = [
    "ConfigIssue",
    "DEFAULT_LOCKFILE",
    "Interpreter",
    "MANIFEST_FILENAME",
    "Manifest",
    "Settings",
    "build_graph",
    "interpret",
    "load_manifest",
]
