"""Clauses and their derived state.

A clause is a disjunction of literals produced by one constraint: a
requirement ("one of these versions"), an incompatibility ("not both"),
or the single-version rule of a package. Its content never changes
after encoding; its ``ClauseState`` is recomputed from the current
assignment every time it is asked for.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from satlock.core.sat.literals import Literal, Variable


class ClauseState(Enum):
    """State of a clause under a partial assignment."""

    # nothing decided yet, or two or more literals still open
    UNKNOWN = "unknown"

    # one literal open, every other literal false
    UNIT = "unit"

    # at least one literal true
    SATISFIED = "satisfied"

    # every literal false
    UNSATISFIED = "unsatisfied"


@dataclass(frozen=True, eq=False)
class Clause:
    """An immutable disjunction of literals.

    Clauses compare by identity: two requirements with the same literals
    are still reported separately by the conflict diagnoser.

    Attributes:
        literals: The disjuncts, in encoding order.
        origin: The requirement, incompatibility or single-version rule
            this clause encodes.
        index: Position in the encoding's clause list.
    """

    literals: tuple[Literal, ...]
    origin: Any = None
    index: int = 0

    def __len__(self) -> int:
        return len(self.literals)

    @property
    def variables(self) -> tuple[Variable, ...]:
        return tuple(lit.variable for lit in self.literals)

    def state(self, value_of: Callable[[Variable], bool | None]) -> ClauseState:
        """Derive the clause state from variable values.

        Args:
            value_of: Returns True, False, or None (unassigned) for a
                variable.

        Returns:
            The ``ClauseState`` under that assignment.
        """
        open_count = 0
        for lit in self.literals:
            value = lit.value_under(value_of(lit.variable))
            if value is True:
                return ClauseState.SATISFIED
            if value is None:
                open_count += 1
        if open_count == 0:
            return ClauseState.UNSATISFIED
        if open_count == 1:
            return ClauseState.UNIT
        return ClauseState.UNKNOWN

    def __str__(self) -> str:
        return "(" + " | ".join(str(lit) for lit in self.literals) + ")"

    def __repr__(self) -> str:
        return f"Clause#{self.index}{self}"
