"""Version constraints, dependency edges, and conflict edges.

The package index declares requirements and conflicts with constraint
strings; the resolution engine never sees them. The index evaluates them
here to enumerate candidate versions.

A constraint is a comma-separated conjunction of atoms. An atom is an
operator followed by a version; a bare version means ``==``::

    ==1.2.0   !=1.2.0   >=1.0   <=2.0   >1.0   <2.0   ^1.2.0   ~1.2.0   *

Ordering operators use full version precedence, so ``<1.0.0`` admits
``1.0.0-rc.1``. Caret keeps the major version (major and minor below
1.0); tilde keeps major and minor.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass

from satlock.core.versions import VERSION_PATTERN, parse_version, version_key

_ATOM_RE = re.compile(
    r"^\s*(?P<op>==|!=|>=|<=|>|<|\^|~)?\s*"
    rf"(?P<ver>{VERSION_PATTERN})\s*$"
)

_ORDERING: dict[str, Callable[[tuple, tuple], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}


def _caret(version: str, target: str) -> bool:
    v, t = parse_version(version), parse_version(target)
    keep = 2 if t[0] == 0 else 1
    return v[:keep] == t[:keep] and version_key(version) >= version_key(target)


def _tilde(version: str, target: str) -> bool:
    v, t = parse_version(version), parse_version(target)
    return v[:2] == t[:2] and version_key(version) >= version_key(target)


# ---------------------------------------------------------------------------
# VersionConstraint
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VersionConstraint:
    """A version requirement such as ``>=1.0.0,<2.0.0`` or ``^2.1``.

    Attributes:
        raw: The constraint string as written in the manifest.
    """

    raw: str

    @property
    def is_wildcard(self) -> bool:
        return self.raw.strip() == "*"

    @property
    def atoms(self) -> list[str]:
        return [a.strip() for a in self.raw.strip().split(",") if a.strip()]

    def validate(self) -> None:
        """Check the constraint syntax without evaluating it.

        Raises:
            ValueError: If the constraint or one of its atoms is malformed.
        """
        if self.is_wildcard:
            return
        if not self.atoms:
            raise ValueError(f"Empty constraint: {self.raw!r}")
        for atom in self.atoms:
            self._parse_atom(atom)

    def satisfies(self, version: str) -> bool:
        """Return True if *version* meets every atom of this constraint.

        Raises:
            ValueError: If *version* or the constraint is malformed.
        """
        if self.is_wildcard:
            return True
        parse_version(version)
        return all(self._check(atom, version) for atom in self.atoms)

    @staticmethod
    def _parse_atom(atom: str) -> tuple[str, str]:
        m = _ATOM_RE.match(atom)
        if not m:
            raise ValueError(f"Invalid constraint atom: {atom!r}")
        return m.group("op") or "==", m.group("ver")

    @classmethod
    def _check(cls, atom: str, version: str) -> bool:
        op, target = cls._parse_atom(atom)
        if op == "^":
            return _caret(version, target)
        if op == "~":
            return _tilde(version, target)
        return _ORDERING[op](version_key(version), version_key(target))

    def __repr__(self) -> str:
        return f"VersionConstraint({self.raw!r})"


# ---------------------------------------------------------------------------
# Graph edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageDependency:
    """Installing the declaring version requires ``package`` in ``constraint``.

    Encoded as ``~x_{X,V} OR x_{package,w_1} OR ... OR x_{package,w_n}``
    over the versions ``w_i`` satisfying the constraint.
    """

    package: str
    constraint: VersionConstraint


@dataclass(frozen=True)
class PackageConflict:
    """The declaring version cannot coexist with ``package`` in ``constraint``.

    Encoded as ``~x_{X,V} OR ~x_{package,w}`` for every satisfying ``w``.
    """

    package: str
    constraint: VersionConstraint
