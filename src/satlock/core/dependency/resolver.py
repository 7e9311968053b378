"""SAT-based dependency resolution for a project's requirements.

Turns a ``DependencyGraph`` plus the project's root requirements into the
engine's ``RequirementSet``, runs the ``Solver`` and reports the outcome
as a ``Resolution``.

Requirement-set building walks the graph breadth-first from the root
requirements. Every candidate reached contributes its dependencies as
conditional requirements and its conflicts as incompatibilities. A
dependency that no known version satisfies does not make the input
malformed: only the candidate declaring it becomes uninstallable. Root
requirements and pins without candidates are malformed.

Theorem (Resolution Soundness): the encoding is satisfiable if and only if
an installation exists that meets every requirement, pin and conflict
with one version per package.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from satlock.core.dependency.constraints import VersionConstraint
from satlock.core.dependency.graph import DependencyGraph
from satlock.core.sat import (
    CancellationToken,
    ConflictSet,
    EventSink,
    Requirement,
    RequirementSet,
    Solver,
    SolverState,
    encode,
)
from satlock.exceptions import MalformedConstraintError

logger = logging.getLogger(__name__)


class ResolutionStatus(Enum):
    """Outcome of one resolution attempt."""

    SATISFIED = "satisfied"
    UNSATISFIABLE = "unsatisfiable"
    MALFORMED_CONSTRAINT = "malformed_constraint"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Resolution: The output of SAT-based dependency resolution
# ---------------------------------------------------------------------------


@dataclass
class Resolution:
    """Result of SAT-based dependency resolution.

    A successful resolution corresponds to a valid lockfile -- a concrete
    assignment of exactly one version per installed package that satisfies
    all dependency and conflict constraints.

    Attributes:
        status: The outcome.
        installed: Mapping of package -> resolved version. Empty unless
            SATISFIED.
        conflicts: Human-readable descriptions of why resolution failed.
        conflict_set: The diagnosed conflict set when UNSATISFIABLE.
        malformed: The rejected requirement when MALFORMED_CONSTRAINT.
        stats: Solver counters (decisions, propagations, ...).
    """

    status: ResolutionStatus
    installed: dict[str, str] = field(default_factory=dict)
    conflicts: list[str] = field(default_factory=list)
    conflict_set: ConflictSet | None = None
    malformed: Requirement | None = None
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status is ResolutionStatus.SATISFIED


# ---------------------------------------------------------------------------
# DependencyResolver
# ---------------------------------------------------------------------------


class DependencyResolver:
    """Resolves root requirements against a dependency graph.

    Each call to ``resolve`` builds a fresh requirement set and a fresh
    ``Solver``; nothing is shared between calls.

    Args:
        graph: The package index to resolve against.
        requirements: Root requirements, package -> constraint, in
            declaration order.
        pins: Optional package -> exact version fixed by the project.
        max_decisions: Optional decision budget for the search.
        cancel: Optional cancellation token.
        on_event: Optional solver event sink.
    """

    def __init__(
        self,
        graph: DependencyGraph,
        requirements: dict[str, VersionConstraint] | None = None,
        pins: dict[str, str] | None = None,
        max_decisions: int | None = None,
        cancel: CancellationToken | None = None,
        on_event: EventSink | None = None,
    ) -> None:
        self._graph = graph
        self._requirements = dict(requirements or {})
        self._pins = dict(pins or {})
        self._max_decisions = max_decisions
        self._cancel = cancel
        self._on_event = on_event

    def resolve(self) -> Resolution:
        """Execute SAT-based dependency resolution.

        Returns:
            A ``Resolution``. MALFORMED_CONSTRAINT, UNSATISFIABLE and
            CANCELLED are reported through ``status``, never raised.

        Raises:
            SolverInvariantError: If the engine detects internal corruption.
        """
        requirement_set = self.build_requirement_set()
        try:
            formula = encode(requirement_set)
        except MalformedConstraintError as exc:
            logger.warning("Malformed input: %s", exc)
            return Resolution(
                status=ResolutionStatus.MALFORMED_CONSTRAINT,
                conflicts=[str(exc)],
                malformed=exc.requirement,
            )

        for cycle in self._graph.detect_cycles():
            logger.info("Dependency cycle: %s", " -> ".join(cycle))

        solver = Solver(
            formula,
            cancel=self._cancel,
            max_decisions=self._max_decisions,
            on_event=self._on_event,
        )
        result = solver.solve()
        stats = result.stats.as_dict()
        logger.info(
            "Resolution %s after %d decision(s), %d backtrack(s)",
            result.state.value, result.stats.decisions, result.stats.backtracks,
        )

        if result.state is SolverState.SATISFIED:
            return Resolution(
                status=ResolutionStatus.SATISFIED,
                installed=result.model,
                stats=stats,
            )
        if result.state is SolverState.CANCELLED:
            return Resolution(
                status=ResolutionStatus.CANCELLED,
                conflicts=["Resolution cancelled before completion"],
                stats=stats,
            )
        return Resolution(
            status=ResolutionStatus.UNSATISFIABLE,
            conflicts=result.conflict.describe() if result.conflict else [],
            conflict_set=result.conflict,
            stats=stats,
        )

    def build_requirement_set(self) -> RequirementSet:
        """Build the engine input reachable from the root requirements.

        Returns:
            Root requirements first (pins, then declared requirements),
            followed by the dependencies of every reachable candidate in
            breadth-first order. Incompatibilities follow the same order.
        """
        graph = self._graph
        reqs = RequirementSet()
        queue: deque[tuple[str, str]] = deque()
        reached: set[tuple[str, str]] = set()

        def reach(name: str, versions: list[str]) -> None:
            for version in versions:
                if (name, version) not in reached:
                    reached.add((name, version))
                    queue.append((name, version))

        for name, version in self._pins.items():
            candidates = [version] if graph.get_node(name, version) else []
            reqs.requirements.append(Requirement(
                name, f"=={version}", tuple(candidates), pinned=True,
            ))
            reach(name, candidates)

        for name, constraint in self._requirements.items():
            candidates = graph.candidates(name, constraint)
            reqs.requirements.append(
                Requirement(name, constraint.raw, tuple(candidates))
            )
            reach(name, candidates)

        while queue:
            name, version = queue.popleft()
            node = graph.get_node(name, version)
            if node is None:
                continue
            for dep in node.dependencies:
                candidates = graph.candidates(dep.package, dep.constraint)
                if not candidates:
                    reqs.exclude(
                        name, version,
                        reason=f"requires {dep.package} {dep.constraint.raw!r} "
                        "but no satisfying version exists",
                    )
                    continue
                reqs.requirements.append(Requirement(
                    dep.package, dep.constraint.raw, tuple(candidates),
                    dependent=(name, version),
                ))
                reach(dep.package, candidates)
            for conflict in node.conflicts:
                for other in graph.candidates(conflict.package, conflict.constraint):
                    reqs.exclude(
                        name, version, other=(conflict.package, other),
                        reason=f"declared conflict with {conflict.package} "
                        f"{conflict.constraint.raw!r}",
                    )

        logger.debug(
            "Built %d requirement(s), %d incompatibilit(ies) from %d candidate(s)",
            len(reqs.requirements), len(reqs.incompatibilities), len(reached),
        )
        return reqs
