"""Lockfile data models: LockedPackage and LockfileMetadata.

Defines the core data structures used in the ``satlock-lock.json``
format. These are pure data holders (dataclasses) with no business logic,
making them safe to import without circular-dependency concerns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Integrity hash format: "sha256:<64-hex-characters>"
# ---------------------------------------------------------------------------

_INTEGRITY_RE = re.compile(r"^sha256:[0-9a-f]{64}$")


# ---------------------------------------------------------------------------
# LockedPackage: A single entry in the lockfile
# ---------------------------------------------------------------------------


@dataclass
class LockedPackage:
    """A single package entry in the lockfile.

    Attributes:
        name: Package name (e.g., "http-client").
        version: Resolved version (e.g., "1.2.3").
        dependencies: Mapping of dependency name to its resolved version.
    """

    name: str
    version: str
    dependencies: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# LockfileMetadata: Top-level metadata section
# ---------------------------------------------------------------------------


@dataclass
class LockfileMetadata:
    """Metadata section of the lockfile.

    Attributes:
        total_packages: Expected number of package entries. Used during
            validation to detect incomplete writes.
        resolution_strategy: The algorithm that produced the lockfile
            ("sat" for the resolver, "manual" for hand-authored files).
        root: Name of the project the lockfile belongs to.
        manifest_integrity: ``sha256:<hex>`` of the manifest the lockfile
            was resolved from, or "" when unknown.
    """

    total_packages: int = 0
    resolution_strategy: str = "sat"
    root: str = ""
    manifest_integrity: str = ""
