"""Clause construction: from a requirement set to a CNF formula.

Encoding (after the OPIUM approach, Tucker et al., ICSE 2007):

- one boolean variable per (package, version) candidate;
- per requirement, the clause ``~dependent OR c_1 OR ... OR c_n`` over
  its candidates (no ``~dependent`` literal for a root requirement);
- per incompatibility, ``~x`` or ``~x OR ~y``;
- per package, the pairwise clauses ``~v_i OR ~v_j`` so that at most one
  version is selected.

A requirement without candidates can never hold. It is rejected here with
``MalformedConstraintError`` so that search never starts on such input.

References
----------
.. [OPIUM07] Tucker, C. et al. (2007). "OPIUM: Optimal Package Install/
   Uninstall Manager." ICSE '07, 178-188.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from satlock.core.sat.clause import Clause
from satlock.core.sat.literals import Literal, Variable
from satlock.core.versions import version_key as _default_version_key
from satlock.exceptions import MalformedConstraintError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Clause origins
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Requirement:
    """Some version of ``package`` out of ``candidates`` must be selected.

    Attributes:
        package: Required package identifier.
        constraint: The constraint expression as authored (informational).
        candidates: Versions known to satisfy the constraint.
        dependent: ``(package, version)`` that declares this requirement,
            or None for a root requirement of the project.
        pinned: True when the requirement comes from a version pin.
    """

    package: str
    constraint: str
    candidates: tuple[str, ...] = ()
    dependent: tuple[str, str] | None = None
    pinned: bool = False

    def __post_init__(self) -> None:
        # dict.fromkeys keeps first occurrence order
        object.__setattr__(
            self, "candidates", tuple(dict.fromkeys(self.candidates))
        )

    def describe(self) -> str:
        target = f"{self.package} {self.constraint!r}"
        if self.pinned:
            return f"pinned {target}"
        if self.dependent is None:
            return f"root requires {target}"
        return f"{self.dependent[0]}@{self.dependent[1]} requires {target}"


@dataclass(frozen=True)
class Incompatibility:
    """A candidate that cannot be installed, alone or next to another one.

    Attributes:
        package: Package of the excluded candidate.
        version: Version of the excluded candidate.
        other: ``(package, version)`` it conflicts with, or None when the
            candidate is unusable on its own.
        reason: Human-readable explanation.
    """

    package: str
    version: str
    other: tuple[str, str] | None = None
    reason: str = ""

    def describe(self) -> str:
        if self.other is not None:
            text = f"{self.package}@{self.version} conflicts with {self.other[0]}@{self.other[1]}"
        else:
            text = f"{self.package}@{self.version} cannot be installed"
        return f"{text}: {self.reason}" if self.reason else text


@dataclass(frozen=True)
class SingleVersion:
    """At most one version of ``package`` can be installed."""

    package: str

    def describe(self) -> str:
        return f"only one version of {self.package} can be installed"


@dataclass
class RequirementSet:
    """Ordered input of one resolution attempt."""

    requirements: list[Requirement] = field(default_factory=list)
    incompatibilities: list[Incompatibility] = field(default_factory=list)

    def require(
        self,
        package: str,
        candidates: list[str] | tuple[str, ...],
        constraint: str = "*",
        dependent: tuple[str, str] | None = None,
    ) -> Requirement:
        """Append a requirement and return it."""
        req = Requirement(package, constraint, tuple(candidates), dependent)
        self.requirements.append(req)
        return req

    def exclude(
        self,
        package: str,
        version: str,
        other: tuple[str, str] | None = None,
        reason: str = "",
    ) -> Incompatibility:
        """Append an incompatibility and return it."""
        inc = Incompatibility(package, version, other, reason)
        self.incompatibilities.append(inc)
        return inc


# ---------------------------------------------------------------------------
# Formula
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Formula:
    """Variables and clauses of one resolution attempt.

    Attributes:
        variables: All variables, in creation order.
        clauses: All clauses, in encoding order.
        packages: Package -> its variables, newest version first. Keys are
            in order of first appearance.
    """

    variables: tuple[Variable, ...]
    clauses: tuple[Clause, ...]
    packages: dict[str, tuple[Variable, ...]]

    def variable(self, package: str, version: str) -> Variable | None:
        for var in self.packages.get(package, ()):
            if var.version == version:
                return var
        return None


def encode(
    requirement_set: RequirementSet,
    version_key: Callable[[str], Any] = _default_version_key,
) -> Formula:
    """Build the CNF formula for a requirement set.

    Args:
        requirement_set: Requirements and incompatibilities, in order.
        version_key: Sort key ranking versions (higher is newer).

    Returns:
        The encoded ``Formula``.

    Raises:
        MalformedConstraintError: If a requirement has no candidates.
    """
    for req in requirement_set.requirements:
        if not req.candidates:
            raise MalformedConstraintError(req)

    variables: dict[tuple[str, str], Variable] = {}

    def var(package: str, version: str) -> Variable:
        key = (package, version)
        if key not in variables:
            variables[key] = Variable(package, version, len(variables))
        return variables[key]

    for req in requirement_set.requirements:
        if req.dependent is not None:
            var(*req.dependent)
        for version in req.candidates:
            var(req.package, version)
    for inc in requirement_set.incompatibilities:
        var(inc.package, inc.version)
        if inc.other is not None:
            var(*inc.other)

    raw: list[tuple[tuple[Literal, ...], Any]] = []

    for req in requirement_set.requirements:
        literals = [var(req.package, v).selected for v in req.candidates]
        if req.dependent is not None:
            dependent = var(*req.dependent)
            if dependent.selected in literals:
                logger.debug("Dropping self-satisfied requirement %s", req.describe())
                continue
            literals.insert(0, dependent.excluded)
        raw.append((tuple(literals), req))

    for inc in requirement_set.incompatibilities:
        literals = [var(inc.package, inc.version).excluded]
        if inc.other is not None and inc.other != (inc.package, inc.version):
            literals.append(var(*inc.other).excluded)
        raw.append((tuple(literals), inc))

    packages: dict[str, list[Variable]] = {}
    for variable in variables.values():
        packages.setdefault(variable.package, []).append(variable)
    for name, versions in packages.items():
        versions.sort(key=lambda v: version_key(v.version), reverse=True)
        rule = SingleVersion(name)
        for i in range(len(versions)):
            for j in range(i + 1, len(versions)):
                raw.append(((versions[i].excluded, versions[j].excluded), rule))

    clauses = tuple(
        Clause(literals, origin, index)
        for index, (literals, origin) in enumerate(raw)
    )
    logger.debug(
        "Encoded %d variables into %d clauses", len(variables), len(clauses)
    )
    return Formula(
        variables=tuple(variables.values()),
        clauses=clauses,
        packages={name: tuple(vs) for name, vs in packages.items()},
    )
