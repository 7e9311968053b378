"""Lockfile core class: package management, integrity, and serialization.

The ``Lockfile`` class is the central data structure representing a
``satlock-lock.json`` file. It provides:

- **Package management:** add, get, count, and list packages.
- **Integrity:** SHA-256 hashing of the manifest a lock was built from.
- **Serialization:** deterministic ``to_dict``, ``to_json``, and ``write``.

Determinism guarantee: package entries are sorted alphabetically by name,
and all dictionary keys are sorted. Two lockfiles with the same content
produce identical JSON apart from the ``generated_at`` timestamp.

References
----------
.. [npm-lock] npm documentation. "package-lock.json." File format
   guaranteeing deterministic installs across environments.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from satlock import __version__
from satlock.core.lockfile.models import LockedPackage, LockfileMetadata


class Lockfile:
    """Resolved package set of a project, analogous to package-lock.json.

    Example::

        lf = Lockfile()
        lf.add_package(LockedPackage(name="http", version="2.1.0"))
        lf.write(Path("satlock-lock.json"))
    """

    LOCKFILE_VERSION: str = "1.0"
    INTEGRITY_ALGORITHM: str = "sha256"

    def __init__(self) -> None:
        self._packages: dict[str, LockedPackage] = {}
        self._metadata = LockfileMetadata()

    # -- Package management -------------------------------------------------

    def add_package(self, package: LockedPackage) -> None:
        """Add a locked package entry, replacing one with the same name.

        The metadata ``total_packages`` counter is updated automatically.
        """
        self._packages[package.name] = package
        self._metadata.total_packages = len(self._packages)

    def get_package(self, name: str) -> LockedPackage | None:
        return self._packages.get(name)

    @property
    def package_count(self) -> int:
        """Return the number of locked packages."""
        return len(self._packages)

    @property
    def package_names(self) -> list[str]:
        """Return sorted list of all package names in the lockfile."""
        return sorted(self._packages.keys())

    @property
    def versions(self) -> dict[str, str]:
        """Return the locked package -> version mapping."""
        return {name: self._packages[name].version for name in self.package_names}

    # -- Integrity ----------------------------------------------------------

    @staticmethod
    def compute_integrity(content: str | bytes) -> str:
        """Compute the SHA-256 integrity string of *content*.

        Returns:
            Integrity string in "sha256:<64-hex-chars>" format.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        digest = hashlib.sha256(content).hexdigest()
        return f"sha256:{digest}"

    def matches_manifest(self, manifest_text: str | bytes) -> bool:
        """Return True if this lockfile was resolved from *manifest_text*."""
        if not self._metadata.manifest_integrity:
            return False
        return self.compute_integrity(manifest_text) == self._metadata.manifest_integrity

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the lockfile to a dict matching the schema.

        Returns:
            A dictionary suitable for JSON serialization.
        """
        packages_dict: dict[str, Any] = {}
        for name in sorted(self._packages.keys()):
            package = self._packages[name]
            packages_dict[name] = {
                "version": package.version,
                "dependencies": dict(sorted(package.dependencies.items())),
            }

        metadata_dict: dict[str, Any] = {
            "total_packages": self._metadata.total_packages,
            "resolution_strategy": self._metadata.resolution_strategy,
        }
        if self._metadata.root:
            metadata_dict["root"] = self._metadata.root
        if self._metadata.manifest_integrity:
            metadata_dict["manifest_integrity"] = self._metadata.manifest_integrity

        return {
            "lockfile_version": self.LOCKFILE_VERSION,
            "generated_by": f"satlock {__version__}",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "integrity_algorithm": self.INTEGRITY_ALGORITHM,
            "packages": packages_dict,
            "metadata": metadata_dict,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a deterministic JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def write(self, path: Path) -> None:
        """Write lockfile to disk as JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")

    # -- Metadata access ----------------------------------------------------

    @property
    def metadata(self) -> LockfileMetadata:
        """Return the lockfile metadata."""
        return self._metadata
