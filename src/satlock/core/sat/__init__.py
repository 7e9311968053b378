"""SAT resolution engine: literals, clauses, trail, watches, solver, diagnosis.

The engine consumes a ``RequirementSet`` whose candidate versions were
already enumerated by the caller, and produces either a version per
package, a ``ConflictSet`` explaining why none exists, or a cancelled
outcome::

    formula = encode(requirement_set)
    result = Solver(formula, cancel=token).solve()

Engine state (trail, watch index) is owned by one ``Solver`` and discarded
with it; independent solvers can run in parallel.
"""

from satlock.core.sat.clause import Clause, ClauseState
from satlock.core.sat.diagnosis import ConflictDiagnoser, ConflictSet
from satlock.core.sat.encoding import (
    Formula,
    Incompatibility,
    Requirement,
    RequirementSet,
    SingleVersion,
    encode,
)
from satlock.core.sat.literals import Literal, Variable
from satlock.core.sat.solver import (
    CancellationToken,
    EventSink,
    SolveResult,
    Solver,
    SolverEvent,
    SolverState,
    SolverStats,
    log_event,
)
from satlock.core.sat.trail import Assignment, AssignmentKind, Trail
from satlock.core.sat.watches import WatchIndex

__all__ = [
    "Assignment",
    "AssignmentKind",
    "CancellationToken",
    "Clause",
    "ClauseState",
    "ConflictDiagnoser",
    "ConflictSet",
    "EventSink",
    "Formula",
    "Incompatibility",
    "Literal",
    "Requirement",
    "RequirementSet",
    "SingleVersion",
    "SolveResult",
    "Solver",
    "SolverEvent",
    "SolverState",
    "SolverStats",
    "Trail",
    "Variable",
    "WatchIndex",
    "encode",
    "log_event",
]
