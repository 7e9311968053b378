"""Shared fixtures for lockfile tests."""

from __future__ import annotations

import pytest

from satlock.core.dependency import (
    DependencyGraph,
    PackageConflict,
    PackageDependency,
    PackageNode,
    VersionConstraint,
)
from satlock.core.lockfile import LockedPackage, Lockfile


@pytest.fixture
def graph() -> DependencyGraph:
    """web@2.0.0 -> lib>=1.0.0; lib 1.0.0 and 1.1.0; web conflicts with legacy."""
    g = DependencyGraph()
    g.add_package(PackageNode(
        "web", "2.0.0",
        dependencies=[PackageDependency("lib", VersionConstraint(">=1.0.0"))],
        conflicts=[PackageConflict("legacy", VersionConstraint("*"))],
    ))
    g.add_package(PackageNode("lib", "1.0.0"))
    g.add_package(PackageNode("lib", "1.1.0"))
    g.add_package(PackageNode("legacy", "0.9.0"))
    return g


@pytest.fixture
def lockfile() -> Lockfile:
    """A consistent two-package lockfile."""
    lf = Lockfile()
    lf.add_package(LockedPackage("web", "2.0.0", {"lib": "1.1.0"}))
    lf.add_package(LockedPackage("lib", "1.1.0"))
    return lf
