"""Conflict diagnosis for unsatisfiable requirement sets.

When a clause is falsified at decision level 0 no decision is left to
undo. The diagnoser walks back from that clause through the trail:

- a PROPAGATED or FACT assignment contributes its antecedent clause, whose
  other literals were falsified by earlier assignments that are walked in
  turn;
- a FLIPPED assignment contributes the clauses that refuted the decision
  it replaced (recorded by the solver when it backtracked);
- decisions and defaulted assignments end the walk.

The resulting conflict set is best-effort: every returned constraint took
part in the derivation of the contradiction, and together they are
unsatisfiable, but no subset minimality is attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from satlock.core.sat.clause import Clause
from satlock.core.sat.encoding import Requirement
from satlock.core.sat.trail import AssignmentKind, Trail


@dataclass(frozen=True)
class ConflictSet:
    """Constraints implicated in a proven contradiction.

    Attributes:
        clauses: Implicated clauses in encoding order.
        origins: Distinct origins of those clauses, in order of their
            first clause.
    """

    clauses: tuple[Clause, ...]
    origins: tuple[Any, ...]

    @property
    def requirements(self) -> tuple[Requirement, ...]:
        """The implicated requirements only."""
        return tuple(o for o in self.origins if isinstance(o, Requirement))

    def describe(self) -> list[str]:
        """One human-readable line per implicated constraint."""
        lines = []
        for origin in self.origins:
            describe = getattr(origin, "describe", None)
            lines.append(describe() if describe else str(origin))
        return lines


class ConflictDiagnoser:
    """Explains falsified clauses in terms of the trail that falsified them."""

    def __init__(self, trail: Trail) -> None:
        self._trail = trail

    def implicated(self, conflict: Clause) -> set[Clause]:
        """Collect every clause that led to *conflict* being falsified.

        Args:
            conflict: A clause that is UNSATISFIED under the current trail.

        Returns:
            The clause itself plus all clauses reached through antecedents
            and recorded refutations.
        """
        found: set[Clause] = set()
        visited = set()
        stack = [conflict]
        while stack:
            clause = stack.pop()
            if clause in found:
                continue
            found.add(clause)
            for lit in clause.literals:
                entry = self._trail.assignment_of(lit.variable)
                if entry is None or entry.variable in visited:
                    continue
                visited.add(entry.variable)
                if entry.kind is AssignmentKind.FLIPPED:
                    found.update(entry.refutation)
                elif entry.antecedent is not None:
                    stack.append(entry.antecedent)
        return found

    def diagnose(self, conflict: Clause) -> ConflictSet:
        """Build the ``ConflictSet`` for a level-0 conflict."""
        clauses = sorted(self.implicated(conflict), key=lambda c: c.index)
        origins: dict[Any, None] = {}
        for clause in clauses:
            origins.setdefault(clause.origin, None)
        return ConflictSet(clauses=tuple(clauses), origins=tuple(origins))
