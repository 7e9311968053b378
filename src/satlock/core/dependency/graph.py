"""Package index: the dependency graph of every known package version.

Holds one ``PackageNode`` per (package, version) with its dependency and
conflict edges, answers candidate queries for the resolver, and detects
dependency cycles at package-name level (cycles are legal for resolution
but worth reporting).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from satlock.core.dependency.constraints import (
    PackageConflict,
    PackageDependency,
    VersionConstraint,
)
from satlock.core.versions import version_key


# ---------------------------------------------------------------------------
# PackageNode: A vertex in the graph
# ---------------------------------------------------------------------------


@dataclass
class PackageNode:
    """A node representing a specific package at a specific version."""

    name: str
    version: str
    dependencies: list[PackageDependency] = field(default_factory=list)
    conflicts: list[PackageConflict] = field(default_factory=list)


# ---------------------------------------------------------------------------
# DependencyGraph
# ---------------------------------------------------------------------------


class DependencyGraph:
    """All package versions known to one resolution, with their edges.

    The graph supports:
    - Adding package nodes (multiple versions per package name)
    - Querying available versions, candidates, dependencies, and conflicts
    - Cycle detection via DFS coloring

    Thread safety: This class is NOT thread-safe. External synchronization is
    required for concurrent access.
    """

    def __init__(self) -> None:
        self._nodes: dict[tuple[str, str], PackageNode] = {}

    @property
    def packages(self) -> list[str]:
        """Return all package names, in insertion order."""
        return list(dict.fromkeys(name for name, _ in self._nodes))

    @property
    def node_count(self) -> int:
        """Return the total number of (package, version) nodes."""
        return len(self._nodes)

    def add_package(self, node: PackageNode) -> None:
        """Add a package node to the graph.

        If a node with the same (name, version) already exists, it is replaced.

        Args:
            node: The ``PackageNode`` to add.
        """
        self._nodes[(node.name, node.version)] = node

    def get_node(self, name: str, version: str) -> PackageNode | None:
        """Retrieve a specific package node by name and version."""
        return self._nodes.get((name, version))

    def get_versions(self, name: str) -> list[str]:
        """Return all available versions of a package, newest first.

        Args:
            name: The package name to look up.

        Returns:
            List of version strings sorted newest-first. Empty if unknown.
        """
        versions = [ver for (pkg, ver) in self._nodes if pkg == name]
        versions.sort(key=version_key, reverse=True)
        return versions

    def candidates(self, name: str, constraint: VersionConstraint) -> list[str]:
        """Return the versions of *name* satisfying *constraint*, newest first."""
        return [v for v in self.get_versions(name) if constraint.satisfies(v)]

    def detect_cycles(self) -> list[list[str]]:
        """Detect circular dependencies using DFS coloring.

        Versions are collapsed to package names, so a cycle means some
        versions of these packages may depend on each other in a loop.

        Returns:
            A list of cycles, where each cycle is a list of package names
            forming the cycle path (e.g., ["A", "B", "A"]). Empty if none.
        """
        adj: dict[str, list[str]] = defaultdict(list)
        for (name, _), node in self._nodes.items():
            for dep in node.dependencies:
                if dep.package not in adj[name]:
                    adj[name].append(dep.package)

        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = defaultdict(int)
        path: list[str] = []
        cycles: list[list[str]] = []

        def _dfs(u: str) -> None:
            color[u] = GRAY
            path.append(u)
            for v in adj.get(u, []):
                if color[v] == GRAY:
                    cycles.append(path[path.index(v):] + [v])
                elif color[v] == WHITE:
                    _dfs(v)
            path.pop()
            color[u] = BLACK

        for name in self.packages:
            if color[name] == WHITE:
                _dfs(name)
        return cycles
