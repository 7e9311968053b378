"""Dependency graph and SAT-based dependency resolution.

This package holds the package index (versions, dependency and conflict
edges), the version-constraint language used to enumerate candidates, and
the resolver that feeds the SAT engine in ``satlock.core.sat``. All public
names are re-exported here.

Formal Definition
-----------------
A dependency graph is a 4-tuple G = (P, V, D, C) where:

- **P** = set of package names (strings)
- **V**: P -> 2^Versions = available versions per package
- **D**: P x Versions -> 2^(P x Constraint) = dependency relation
- **C**: P x Versions -> 2^(P x Constraint) = conflict relation
"""

from satlock.core.dependency.constraints import (
    PackageConflict,
    PackageDependency,
    VersionConstraint,
)
from satlock.core.dependency.graph import (
    DependencyGraph,
    PackageNode,
)
from satlock.core.dependency.resolver import (
    DependencyResolver,
    Resolution,
    ResolutionStatus,
)

__all__ = [
    "VersionConstraint",
    "PackageDependency",
    "PackageConflict",
    "PackageNode",
    "DependencyGraph",
    "DependencyResolver",
    "Resolution",
    "ResolutionStatus",
]
