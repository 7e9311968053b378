"""The assignment trail: chronological record of every value the solver set.

Each entry remembers the decision level it was made at, why it was made
(``AssignmentKind``) and, for forced assignments, the clause that forced
it. The trail doubles as the propagation queue: entries after the
propagation head still have to be pushed through the watch index.

Invariants (checked on every mutation, violations raise
``SolverInvariantError``):

- no variable appears twice among live entries;
- levels never decrease along the trail;
- the current level equals the number of live decisions, and the
  decision that opened level ``n`` is the first entry at level ``n``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from satlock.core.sat.clause import Clause
from satlock.core.sat.literals import Literal, Variable
from satlock.exceptions import SolverInvariantError


class AssignmentKind(Enum):
    """Why a variable received its value."""

    FACT = "fact"
    DECISION = "decision"
    PROPAGATED = "propagated"
    FLIPPED = "flipped"
    DEFAULTED = "defaulted"


@dataclass(frozen=True)
class Assignment:
    """One entry on the trail.

    Attributes:
        variable: The assigned variable.
        value: The boolean value given to it.
        level: Decision level of the assignment.
        kind: Why the value was set.
        antecedent: Forcing clause for FACT and PROPAGATED entries.
        refutation: For FLIPPED entries, the clauses that refuted the
            undone decision. Used by the conflict diagnoser.
    """

    variable: Variable
    value: bool
    level: int
    kind: AssignmentKind
    antecedent: Clause | None = None
    refutation: frozenset[Clause] = field(default_factory=frozenset)

    @property
    def literal(self) -> Literal:
        """The literal made true by this assignment."""
        return Literal(self.variable, self.value)

    @property
    def is_decision(self) -> bool:
        return self.kind is AssignmentKind.DECISION


class Trail:
    """Ordered, backtrackable sequence of ``Assignment`` entries."""

    def __init__(self) -> None:
        self._entries: list[Assignment] = []
        self._by_variable: dict[Variable, Assignment] = {}
        self._decision_positions: list[int] = []
        self._head = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Assignment]:
        return iter(self._entries)

    @property
    def level(self) -> int:
        """Current decision level (number of live decisions)."""
        return len(self._decision_positions)

    @property
    def max_level(self) -> int:
        """Highest level among live entries, or 0 when empty."""
        return self._entries[-1].level if self._entries else 0

    def value(self, variable: Variable) -> bool | None:
        """Return the value of *variable*, or None when unassigned."""
        entry = self._by_variable.get(variable)
        return None if entry is None else entry.value

    def literal_value(self, literal: Literal) -> bool | None:
        return literal.value_under(self.value(literal.variable))

    def assignment_of(self, variable: Variable) -> Assignment | None:
        return self._by_variable.get(variable)

    def decision_at(self, level: int) -> Assignment:
        """Return the decision that opened *level* (1-based)."""
        if not 1 <= level <= self.level:
            raise SolverInvariantError(
                f"No decision at level {level} (current level {self.level})"
            )
        return self._entries[self._decision_positions[level - 1]]

    def push(self, assignment: Assignment) -> None:
        """Append an assignment, enforcing the trail invariants.

        Raises:
            SolverInvariantError: If the variable is already assigned or
                the level does not fit the current decision level.
        """
        if assignment.variable in self._by_variable:
            raise SolverInvariantError(
                f"{assignment.variable} assigned twice on the trail"
            )
        expected = self.level + 1 if assignment.is_decision else self.level
        if assignment.level != expected:
            raise SolverInvariantError(
                f"{assignment.kind.value} assignment of {assignment.variable} "
                f"at level {assignment.level}, expected level {expected}"
            )
        if assignment.is_decision:
            self._decision_positions.append(len(self._entries))
        self._entries.append(assignment)
        self._by_variable[assignment.variable] = assignment

    def next_unpropagated(self) -> Assignment | None:
        """Pop the next entry from the propagation queue."""
        if self._head >= len(self._entries):
            return None
        entry = self._entries[self._head]
        self._head += 1
        return entry

    def backtrack(self, level: int) -> list[Assignment]:
        """Undo every assignment above *level*.

        Args:
            level: Target level, ``0 <= level < self.level``.

        Returns:
            The removed entries in trail order; the first one is the
            decision that opened ``level + 1``.

        Raises:
            SolverInvariantError: If *level* is out of range or the
                remaining trail does not end at or below *level*.
        """
        if not 0 <= level < self.level:
            raise SolverInvariantError(
                f"Cannot backtrack to level {level} from level {self.level}"
            )
        cut = self._decision_positions[level]
        removed = self._entries[cut:]
        del self._entries[cut:]
        del self._decision_positions[level:]
        for entry in removed:
            del self._by_variable[entry.variable]
        self._head = min(self._head, len(self._entries))

        if self.max_level > level or self.level != level:
            raise SolverInvariantError(
                f"Trail ends at level {self.max_level} after backtracking "
                f"to level {level}"
            )
        return removed

    def check(self) -> None:
        """Verify every trail invariant from scratch.

        Raises:
            SolverInvariantError: On the first violated invariant.
        """
        seen: set[Variable] = set()
        previous = 0
        decisions = 0
        for position, entry in enumerate(self._entries):
            if entry.variable in seen:
                raise SolverInvariantError(f"{entry.variable} assigned twice")
            seen.add(entry.variable)
            if entry.level < previous:
                raise SolverInvariantError(
                    f"Level decreases at trail position {position}"
                )
            if entry.is_decision:
                decisions += 1
                if entry.level != decisions:
                    raise SolverInvariantError(
                        f"Decision at position {position} has level "
                        f"{entry.level}, expected {decisions}"
                    )
            elif entry.level != decisions:
                raise SolverInvariantError(
                    f"{entry.kind.value} entry at position {position} has "
                    f"level {entry.level} under {decisions} decisions"
                )
            previous = entry.level
        if decisions != self.level or seen != set(self._by_variable):
            raise SolverInvariantError("Trail index out of sync with entries")
