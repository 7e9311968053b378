"""Lockfile factory: constructing lockfiles from resolution results.

The ``from_resolution`` function builds a ``Lockfile`` from the
``Resolution`` produced by ``DependencyResolver``. This is the primary
entry point in the normal workflow::

    resolution = DependencyResolver(graph, requirements).resolve()
    lockfile = Lockfile.from_resolution(resolution, graph, root="app")
    lockfile.write(Path("satlock-lock.json"))
"""

from __future__ import annotations

from typing import Any

from satlock.core.lockfile.models import LockedPackage
from satlock.exceptions import ResolutionError


def _from_resolution(
    cls: type,
    resolution: Any,
    graph: Any | None = None,
    root: str = "",
    manifest_text: str | bytes | None = None,
) -> Any:
    """Create a lockfile from a successful ``Resolution``.

    Args:
        resolution: A satisfied ``Resolution`` from
            ``satlock.core.dependency``.
        graph: Optional ``DependencyGraph`` used to record which locked
            package each entry depends on.
        root: Project name recorded in the metadata.
        manifest_text: Manifest content, hashed into the metadata so a
            later ``verify`` can detect a stale lockfile.

    Returns:
        A new ``Lockfile`` populated from the resolution result.

    Raises:
        ResolutionError: If the resolution was not successful.
    """
    if not resolution.success:
        raise ResolutionError(
            "Cannot create lockfile from a failed resolution "
            f"({resolution.status.value}): {resolution.conflicts}"
        )

    lf = cls()
    for name, version in resolution.installed.items():
        dependencies: dict[str, str] = {}
        if graph is not None:
            node = graph.get_node(name, version)
            if node is not None:
                for dep in node.dependencies:
                    dep_version = resolution.installed.get(dep.package)
                    if dep_version is not None:
                        dependencies[dep.package] = dep_version
        lf.add_package(LockedPackage(name, version, dependencies))

    lf.metadata.root = root
    if manifest_text is not None:
        lf.metadata.manifest_integrity = cls.compute_integrity(manifest_text)
    return lf
