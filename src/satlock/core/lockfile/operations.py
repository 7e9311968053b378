"""Lockfile operations: deserialization, validation, and diffing.

This module extends the ``Lockfile`` class (defined in ``lockfile.py``)
with classmethods and instance methods for:

- **Deserialization:** ``from_dict``, ``from_json``, ``read`` (disk).
- **Validation:** internal consistency checks.
- **Diffing:** structured comparison of two lockfiles.
- **Installation check:** locked versions against the current index.

These are attached to the ``Lockfile`` class at import time (in
``__init__.py``) to keep each source file focused while presenting a
single unified API to callers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from satlock.core.lockfile.models import (
    LockedPackage,
    LockfileMetadata,
    _INTEGRITY_RE,
)
from satlock.core.versions import is_valid_version
from satlock.exceptions import LockfileError


def _from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Deserialize a lockfile from a dict (parsed JSON).

    Fields not present in the dict use default values.

    Raises:
        LockfileError: If the top level, a package entry, its
            dependencies, or the metadata is not a mapping.
    """
    if not isinstance(data, dict) or not isinstance(data.get("packages", {}), dict):
        raise LockfileError("Lockfile must be a JSON object with a 'packages' object")

    lf = cls()
    for name, entry in data.get("packages", {}).items():
        if not isinstance(entry, dict):
            raise LockfileError(f"Lockfile package {name!r} must be an object")
        deps = entry.get("dependencies", {})
        if not isinstance(deps, dict):
            raise LockfileError(f"Lockfile package {name!r} has non-object 'dependencies'")
        lf._packages[name] = LockedPackage(
            name=name,
            version=entry.get("version", ""),
            dependencies=dict(deps),
        )

    meta = data.get("metadata", {})
    if not isinstance(meta, dict):
        raise LockfileError("Lockfile 'metadata' must be an object")
    lf._metadata = LockfileMetadata(
        total_packages=meta.get("total_packages", len(lf._packages)),
        resolution_strategy=meta.get("resolution_strategy", "sat"),
        root=meta.get("root", ""),
        manifest_integrity=meta.get("manifest_integrity", ""),
    )
    return lf


def _from_json(cls: type, json_str: str) -> Any:
    """Deserialize from a JSON string.

    Raises:
        LockfileError: If the string is not valid JSON.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise LockfileError(f"Lockfile is not valid JSON: {exc}") from exc
    return cls.from_dict(data)


def _read(cls: type, path: Path) -> Any:
    """Read a lockfile from disk.

    Raises:
        LockfileError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileError(f"Cannot read lockfile {path}: {exc}") from exc
    return cls.from_json(text)


def _validate(self: Any) -> list[str]:
    """Validate the lockfile for internal consistency.

    Performs the following checks:

    1. **Dependency completeness:** Every dependency referenced by a
       package must itself be locked.
    2. **Dependency versions:** The version recorded for a dependency must
       be the version locked for that package.
    3. **Integrity format:** A manifest integrity, when present, must
       match ``sha256:<64-hex-chars>``.
    4. **Metadata consistency:** ``total_packages`` must match the number
       of package entries.
    5. **Version non-empty:** Every package must have a version.

    Dependency cycles are legal and not reported.

    Returns:
        List of validation error messages. Empty means the lockfile is
        valid.
    """
    errors: list[str] = []

    for name, package in self._packages.items():
        for dep_name, dep_version in package.dependencies.items():
            locked = self._packages.get(dep_name)
            if locked is None:
                errors.append(
                    f"Package {name!r} depends on {dep_name!r} which is "
                    f"not in the lockfile"
                )
            elif locked.version != dep_version:
                errors.append(
                    f"Package {name!r} records {dep_name}@{dep_version} but "
                    f"{dep_name}@{locked.version} is locked"
                )

    integrity = self._metadata.manifest_integrity
    if integrity and not _INTEGRITY_RE.match(integrity):
        errors.append(f"Invalid manifest integrity format: {integrity!r}")

    if self._metadata.total_packages != len(self._packages):
        errors.append(
            f"Metadata total_packages ({self._metadata.total_packages}) "
            f"does not match actual count ({len(self._packages)})"
        )

    for name, package in self._packages.items():
        if not package.version:
            errors.append(f"Package {name!r} has empty version string")

    return errors


def _diff(self: Any, other: Any) -> dict[str, Any]:
    """Compare two lockfiles and return differences.

    - **added**: Packages present in ``other`` but not in ``self``.
    - **removed**: Packages present in ``self`` but not in ``other``.
    - **changed**: Packages present in both with a different version or
      dependency set.

    Args:
        other: The lockfile to compare against (typically the newer one).

    Returns:
        Dict with keys 'added', 'removed', 'changed'.
    """
    self_names = set(self._packages.keys())
    other_names = set(other._packages.keys())

    changes: list[dict[str, Any]] = []
    for name in sorted(self_names & other_names):
        old = self._packages[name]
        new = other._packages[name]
        if old.version != new.version:
            changes.append({
                "name": name,
                "field": "version",
                "old": old.version,
                "new": new.version,
            })
        if old.dependencies != new.dependencies:
            changes.append({
                "name": name,
                "field": "dependencies",
                "old": dict(sorted(old.dependencies.items())),
                "new": dict(sorted(new.dependencies.items())),
            })

    return {
        "added": sorted(other_names - self_names),
        "removed": sorted(self_names - other_names),
        "changed": changes,
    }


def _check_installation(
    self: Any,
    graph: Any,
    requirements: dict[str, Any] | None = None,
    pins: dict[str, str] | None = None,
) -> list[str]:
    """Check that the locked versions still form a valid installation.

    Re-evaluates the locked package set against the current index instead
    of re-running the solver:

    1. every root requirement and pin is met by a locked version;
    2. every locked version exists in the index;
    3. every dependency of a locked version is met by a locked version;
    4. no declared conflict holds between two locked versions.

    Args:
        graph: The ``DependencyGraph`` to check against.
        requirements: Root requirements, package -> ``VersionConstraint``.
        pins: Package -> pinned version.

    Returns:
        List of problems. Empty means the lockfile is still a valid
        installation for these inputs.
    """
    problems: list[str] = []
    locked = {name: pkg.version for name, pkg in self._packages.items()}

    for name, version in (pins or {}).items():
        if locked.get(name) != version:
            problems.append(
                f"Pin {name}=={version} is not met (locked: {locked.get(name, 'none')})"
            )
    for name, constraint in (requirements or {}).items():
        version = locked.get(name)
        if version is None:
            problems.append(f"Required package {name!r} is not locked")
        elif not is_valid_version(version) or not constraint.satisfies(version):
            problems.append(
                f"Locked {name}@{version} does not satisfy {constraint.raw!r}"
            )

    for name in sorted(locked):
        version = locked[name]
        node = graph.get_node(name, version)
        if node is None:
            problems.append(f"Locked {name}@{version} is not in the package index")
            continue
        for dep in node.dependencies:
            dep_version = locked.get(dep.package)
            if dep_version is None or not (
                is_valid_version(dep_version) and dep.constraint.satisfies(dep_version)
            ):
                problems.append(
                    f"{name}@{version} requires {dep.package} "
                    f"{dep.constraint.raw!r} (locked: {dep_version or 'none'})"
                )
        for conflict in node.conflicts:
            other = locked.get(conflict.package)
            if (
                other is not None
                and is_valid_version(other)
                and conflict.constraint.satisfies(other)
            ):
                problems.append(
                    f"{name}@{version} conflicts with locked {conflict.package}@{other}"
                )
    return problems
