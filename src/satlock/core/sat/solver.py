"""Decision / propagation / backtracking search over an encoded formula.

The solver is a DPLL-style search with two-watched-literal unit
propagation and *chronological* backtracking: on a conflict it undoes the
most recent decision and asserts its complement, without learning new
clauses. Conflict-driven clause learning would prune more of the search
space, but real-world version graphs offer tens to low hundreds of
candidates per package, where plain backtracking with good propagation
finishes quickly and keeps the engine small enough to audit. Re-measure on
real index sizes before swapping the algorithm.

Decision heuristic (deterministic, no restarts or randomness):

1. only candidates demanded by an open requirement are considered: the
   clause is not satisfied yet and its dependent, if any, is selected;
2. the package with the fewest candidates not yet excluded goes first,
   ties broken by the order packages first appear in the input;
3. within that package the newest demanded version is tried first.

Once nothing is demanded, the remaining unassigned candidates are set to
false: packages nobody needs are not installed.

A ``Solver`` owns its trail and watch index and is single-use.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from satlock.core.sat.clause import Clause, ClauseState
from satlock.core.sat.diagnosis import ConflictDiagnoser, ConflictSet
from satlock.core.sat.encoding import Formula
from satlock.core.sat.literals import Variable
from satlock.core.sat.trail import Assignment, AssignmentKind, Trail
from satlock.core.sat.watches import WatchIndex
from satlock.exceptions import SolverInvariantError

logger = logging.getLogger(__name__)


class SolverState(Enum):
    """Search state machine of the solver."""

    SEARCHING = "searching"
    PROPAGATING = "propagating"
    CONFLICT = "conflict"
    SATISFIED = "satisfied"
    UNSATISFIABLE = "unsatisfiable"
    CANCELLED = "cancelled"


class CancellationToken:
    """Cooperative cancellation signal, polled before every decision.

    The token may be set from another thread; the solver only reads it.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def clear(self) -> None:
        self._cancelled = False


@dataclass(frozen=True)
class SolverEvent:
    """Progress or diagnostic event emitted by the solver.

    Attributes:
        kind: One of "fact", "decide", "conflict", "backtrack", "default",
            "cancelled", "satisfied", "unsatisfiable".
        level: Decision level when the event was emitted.
        message: Human-readable detail.
    """

    kind: str
    level: int
    message: str


EventSink = Callable[[SolverEvent], None]


def log_event(event: SolverEvent) -> None:
    """Default event sink: log at DEBUG level."""
    logger.debug("[level %d] %s: %s", event.level, event.kind, event.message)


@dataclass
class SolverStats:
    """Counters of one search."""

    decisions: int = 0
    propagations: int = 0
    conflicts: int = 0
    backtracks: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "decisions": self.decisions,
            "propagations": self.propagations,
            "conflicts": self.conflicts,
            "backtracks": self.backtracks,
        }


@dataclass
class SolveResult:
    """Outcome of ``Solver.solve``.

    Attributes:
        state: SATISFIED, UNSATISFIABLE or CANCELLED.
        model: Package -> selected version. Empty unless SATISFIED.
        stats: Search counters.
        conflict: The conflict set when UNSATISFIABLE.
    """

    state: SolverState
    model: dict[str, str] = field(default_factory=dict)
    stats: SolverStats = field(default_factory=SolverStats)
    conflict: ConflictSet | None = None

    @property
    def satisfied(self) -> bool:
        return self.state is SolverState.SATISFIED


class Solver:
    """Chronological-backtracking SAT solver for one resolution attempt.

    Args:
        formula: The encoded requirement set.
        cancel: Optional token polled before every decision.
        max_decisions: Optional decision budget; exceeding it cancels.
        on_event: Event sink, defaults to ``log_event``.
    """

    def __init__(
        self,
        formula: Formula,
        cancel: CancellationToken | None = None,
        max_decisions: int | None = None,
        on_event: EventSink | None = None,
    ) -> None:
        self.formula = formula
        self.trail = Trail()
        self.watches = WatchIndex(formula.clauses)
        self.stats = SolverStats()
        self.state = SolverState.SEARCHING
        self._diagnoser = ConflictDiagnoser(self.trail)
        self._cancel = cancel
        self._max_decisions = max_decisions
        self._emit = on_event or log_event
        self._used = False
        self._demand_clauses = tuple(
            c for c in formula.clauses if any(lit.positive for lit in c.literals)
        )
        self._package_order = {name: i for i, name in enumerate(formula.packages)}

    # -- Main loop -----------------------------------------------------------

    def solve(self) -> SolveResult:
        """Run the search to a terminal state.

        Returns:
            A ``SolveResult`` in state SATISFIED, UNSATISFIABLE or CANCELLED.

        Raises:
            SolverInvariantError: On internal state corruption, or when the
                solver is run twice.
        """
        if self._used:
            raise SolverInvariantError("Solver instances are single-use")
        self._used = True

        conflict = self._assert_facts()
        while True:
            if conflict is None:
                self.state = SolverState.PROPAGATING
                conflict = self._propagate()

            if conflict is not None:
                self.state = SolverState.CONFLICT
                self.stats.conflicts += 1
                self._emit(SolverEvent("conflict", self.trail.level, str(conflict)))
                if self.trail.level == 0:
                    return self._unsatisfiable(conflict)
                self._backtrack(conflict)
                conflict = None
                continue

            self.state = SolverState.SEARCHING
            choice = self._choose()
            if choice is None:
                if self._default_unrequested():
                    continue
                return self._satisfied()

            if self._cancel_requested():
                self.state = SolverState.CANCELLED
                self._emit(SolverEvent("cancelled", self.trail.level, "search cancelled"))
                return SolveResult(SolverState.CANCELLED, stats=self.stats)
            self._decide(choice)

    # -- Steps ---------------------------------------------------------------

    def _assert_facts(self) -> Clause | None:
        for clause in self.formula.clauses:
            if len(clause) != 1:
                continue
            lit = clause.literals[0]
            value = self.trail.literal_value(lit)
            if value is False:
                return clause
            if value is None:
                self.trail.push(Assignment(
                    lit.variable, lit.positive, 0, AssignmentKind.FACT, clause
                ))
                self._emit(SolverEvent("fact", 0, str(lit)))
        return None

    def _propagate(self) -> Clause | None:
        while True:
            entry = self.trail.next_unpropagated()
            if entry is None:
                return None
            falsified = -entry.literal
            for clause, state, lit in self.watches.update(falsified, self.trail.value):
                if state is ClauseState.UNSATISFIED:
                    return clause
                self.trail.push(Assignment(
                    lit.variable, lit.positive, self.trail.level,
                    AssignmentKind.PROPAGATED, clause,
                ))
                self.stats.propagations += 1

    def _backtrack(self, conflict: Clause) -> None:
        refutation = frozenset(self._diagnoser.implicated(conflict))
        level = self.trail.level
        decision = self.trail.decision_at(level)
        removed = self.trail.backtrack(level - 1)
        if not removed or removed[0] is not decision:
            raise SolverInvariantError(
                f"Backtracking to level {level - 1} did not start at "
                f"decision {decision.variable}"
            )
        self.trail.push(Assignment(
            decision.variable, not decision.value, level - 1,
            AssignmentKind.FLIPPED, None, refutation,
        ))
        self.stats.backtracks += 1
        self._emit(SolverEvent(
            "backtrack", level - 1,
            f"undid {decision.literal}, asserting {-decision.literal}",
        ))

    def _choose(self) -> Variable | None:
        value = self.trail.value
        demanded: dict[str, set[Variable]] = {}
        for clause in self._demand_clauses:
            if any(
                value(lit.variable) is not True
                for lit in clause.literals if not lit.positive
            ):
                continue
            if clause.state(value) is ClauseState.SATISFIED:
                continue
            for lit in clause.literals:
                if lit.positive and value(lit.variable) is None:
                    demanded.setdefault(lit.variable.package, set()).add(lit.variable)
        if not demanded:
            return None

        def remaining(package: str) -> int:
            return sum(
                1 for v in self.formula.packages[package] if value(v) is not False
            )

        package = min(
            demanded, key=lambda p: (remaining(p), self._package_order[p])
        )
        for variable in self.formula.packages[package]:
            if variable in demanded[package]:
                return variable
        raise SolverInvariantError(f"No demanded candidate left for {package}")  # pragma: no cover

    def _decide(self, variable: Variable) -> None:
        self.stats.decisions += 1
        self.trail.push(Assignment(
            variable, True, self.trail.level + 1, AssignmentKind.DECISION
        ))
        self._emit(SolverEvent("decide", self.trail.level, f"trying {variable}"))

    def _default_unrequested(self) -> bool:
        pending = [v for v in self.formula.variables if self.trail.value(v) is None]
        for variable in pending:
            self.trail.push(Assignment(
                variable, False, self.trail.level, AssignmentKind.DEFAULTED
            ))
        if pending:
            self._emit(SolverEvent(
                "default", self.trail.level,
                f"{len(pending)} unrequested candidate(s) left out",
            ))
        return bool(pending)

    def _cancel_requested(self) -> bool:
        if self._cancel is not None and self._cancel.cancelled:
            return True
        return (
            self._max_decisions is not None
            and self.stats.decisions >= self._max_decisions
        )

    # -- Terminal states -----------------------------------------------------

    def _satisfied(self) -> SolveResult:
        self.trail.check()
        self.watches.check()
        model: dict[str, str] = {}
        for entry in self.trail:
            if not entry.value:
                continue
            if entry.variable.package in model:
                raise SolverInvariantError(
                    f"Two versions of {entry.variable.package} selected"
                )
            model[entry.variable.package] = entry.variable.version
        for clause in self.formula.clauses:
            if clause.state(self.trail.value) is not ClauseState.SATISFIED:
                raise SolverInvariantError(f"{clause!r} not satisfied by the model")
        self.state = SolverState.SATISFIED
        self._emit(SolverEvent("satisfied", self.trail.level, f"{len(model)} package(s) selected"))
        return SolveResult(SolverState.SATISFIED, model=model, stats=self.stats)

    def _unsatisfiable(self, conflict: Clause) -> SolveResult:
        self.state = SolverState.UNSATISFIABLE
        diagnosis = self._diagnoser.diagnose(conflict)
        self._emit(SolverEvent(
            "unsatisfiable", 0,
            f"{len(diagnosis.origins)} constraint(s) in conflict",
        ))
        return SolveResult(
            SolverState.UNSATISFIABLE, stats=self.stats, conflict=diagnosis
        )
