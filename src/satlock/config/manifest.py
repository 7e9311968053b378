"""Project manifest loading.

A manifest (``satlock.yaml``) names the project, its root requirements,
optional version pins, settings, and the package index to resolve
against. The index is either inline or a path, relative to the manifest,
to a YAML file holding the same mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from satlock.config.interpreter import ConfigIssue, interpret
from satlock.config.settings import Settings
from satlock.core.dependency import (
    DependencyGraph,
    PackageConflict,
    PackageDependency,
    PackageNode,
    VersionConstraint,
)
from satlock.exceptions import ConfigError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "satlock.yaml"


@dataclass
class Manifest:
    """A validated project manifest.

    Attributes:
        path: Where the manifest was read from.
        text: Raw manifest text, hashed into lockfiles.
        name: Project name.
        version: Project version, "" when not declared.
        requirements: Root requirements in declaration order.
        pins: Package -> pinned version.
        settings: Manifest settings layered over the defaults.
        graph: The package index.
    """

    path: Path
    text: str
    name: str
    version: str = ""
    requirements: dict[str, VersionConstraint] = field(default_factory=dict)
    pins: dict[str, str] = field(default_factory=dict)
    settings: Settings = field(default_factory=Settings)
    graph: DependencyGraph = field(default_factory=DependencyGraph)

    @property
    def lockfile_path(self) -> Path:
        return self.path.parent / self.settings.lockfile


def _safe_load(path: Path, breadcrumb: tuple[str, ...]) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError([ConfigIssue(breadcrumb, f"Cannot read {path}: {exc}")]) from exc
    except yaml.YAMLError as exc:
        raise ConfigError([ConfigIssue(breadcrumb, f"Invalid YAML in {path}: {exc}")]) from exc


def build_graph(index: dict[str, Any] | None) -> DependencyGraph:
    """Build a ``DependencyGraph`` from a validated index mapping."""
    graph = DependencyGraph()
    for package, versions in (index or {}).items():
        for version, node in (versions or {}).items():
            node = node or {}
            graph.add_package(PackageNode(
                name=str(package),
                version=version,
                dependencies=[
                    PackageDependency(str(dep), VersionConstraint(constraint))
                    for dep, constraint in (node.get("requires") or {}).items()
                ],
                conflicts=[
                    PackageConflict(str(other), VersionConstraint(constraint))
                    for other, constraint in (node.get("conflicts") or {}).items()
                ],
            ))
    return graph


def load_manifest(path: Path) -> Manifest:
    """Read, validate and build a manifest.

    Args:
        path: The manifest file, or a directory containing
            ``satlock.yaml``.

    Returns:
        The validated ``Manifest``.

    Raises:
        ConfigError: With every problem found, if the manifest is invalid.
    """
    if path.is_dir():
        path = path / MANIFEST_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError([ConfigIssue((), f"Cannot read {path}: {exc}")]) from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError([ConfigIssue((), f"Invalid YAML: {exc}")]) from exc

    if isinstance(data, dict) and isinstance(data.get("index"), str):
        index_path = path.parent / data["index"]
        logger.debug("Loading package index from %s", index_path)
        data = {**data, "index": _safe_load(index_path, ("index",))}

    issues = interpret(data)
    if issues:
        raise ConfigError(issues)

    settings = Settings().overlay(data.get("settings"))
    manifest = Manifest(
        path=path,
        text=text,
        name=data["name"],
        version=data.get("version") or "",
        requirements={
            str(name): VersionConstraint(constraint)
            for name, constraint in (data.get("requires") or {}).items()
        },
        pins={str(name): version for name, version in (data.get("pins") or {}).items()},
        settings=settings,
        graph=build_graph(data.get("index")),
    )
    logger.info(
        "Loaded manifest %s: %d requirement(s), %d package version(s)",
        manifest.name, len(manifest.requirements), manifest.graph.node_count,
    )
    return manifest
