"""Lockfile: reproducible record of a resolved package set.

This package implements the ``satlock-lock.json`` format. The lockfile
captures every package at its resolved version, the resolved versions of
its dependencies, and the integrity of the manifest it was resolved from.

The package is split into focused submodules:

- ``models``: Data classes (``LockedPackage``, ``LockfileMetadata``).
- ``lockfile``: The ``Lockfile`` class with package management, integrity
  hashing, serialization, and metadata.
- ``operations``: Deserialization (``from_dict``, ``from_json``, ``read``),
  validation, diffing, and the installation check.
- ``factory``: The ``from_resolution`` factory method.

All public names are re-exported here.
"""

# Re-export data models
from satlock.core.lockfile.models import (
    LockedPackage,
    LockfileMetadata,
    _INTEGRITY_RE,
)

# Re-export the Lockfile class
from satlock.core.lockfile.lockfile import Lockfile

# Attach operations to Lockfile as methods/classmethods
from satlock.core.lockfile import operations as _ops
from satlock.core.lockfile import factory as _factory

Lockfile.from_dict = classmethod(_ops._from_dict)
Lockfile.from_json = classmethod(_ops._from_json)
Lockfile.read = classmethod(_ops._read)
Lockfile.validate = _ops._validate
Lockfile.diff = _ops._diff
Lockfile.check_installation = _ops._check_installation
Lockfile.from_resolution = classmethod(_factory._from_resolution)

__all__ = [
    "Lockfile",
    "LockedPackage",
    "LockfileMetadata",
    "_INTEGRITY_RE",
]
