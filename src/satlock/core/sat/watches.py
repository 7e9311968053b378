"""Two-watched-literal index.

Every clause of length two or more is watched by exactly two of its
literals. A clause only needs attention when one of its watched literals
becomes false: it is then rescanned and either

(a) is satisfied by the other watched literal, and the watch stays;
(b) has another literal that is not false, and the watch moves there;
(c) has nothing left but the other watched literal, which is then forced
    (UNIT) or already false (UNSATISFIED, a conflict).

Propagation work is therefore proportional to the literal occurrences
actually touched. Watches are never repaired on backtrack: unassigning
variables can only turn false watched literals back into open ones.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator

from satlock.core.sat.clause import Clause, ClauseState
from satlock.core.sat.literals import Literal, Variable
from satlock.exceptions import SolverInvariantError

logger = logging.getLogger(__name__)

ValueOf = Callable[[Variable], bool | None]


class WatchIndex:
    """Maps each literal to the clauses currently watching it.

    Args:
        clauses: The clauses to index. Clauses shorter than two literals
            are skipped; the solver asserts them as level-0 facts.
    """

    def __init__(self, clauses: Iterable[Clause]) -> None:
        self._watchers: dict[Literal, list[Clause]] = defaultdict(list)
        self._watched: dict[Clause, list[Literal]] = {}
        for clause in clauses:
            if len(clause) < 2:
                continue
            first, second = clause.literals[0], clause.literals[1]
            self._watched[clause] = [first, second]
            self._watchers[first].append(clause)
            self._watchers[second].append(clause)
        logger.debug("Watching %d clauses", len(self._watched))

    def __len__(self) -> int:
        return len(self._watched)

    def watchers(self, literal: Literal) -> tuple[Clause, ...]:
        """Clauses revisited when *literal* becomes false."""
        return tuple(self._watchers.get(literal, ()))

    def watched(self, clause: Clause) -> tuple[Literal, ...]:
        """The two literals currently watching *clause*."""
        return tuple(self._watched.get(clause, ()))

    def update(
        self, falsified: Literal, value_of: ValueOf
    ) -> Iterator[tuple[Clause, ClauseState, Literal | None]]:
        """Rescan the clauses watching a literal that just became false.

        Yields only clauses that need action: ``(clause, UNIT, literal)``
        for a forced literal and ``(clause, UNSATISFIED, None)`` for a
        conflict. The caller may assign forced literals while iterating;
        later rescans see those values.

        Args:
            falsified: The watched literal that is now false.
            value_of: Current variable values.
        """
        for clause in list(self._watchers.get(falsified, ())):
            pair = self._watched[clause]
            other = pair[1] if pair[0] == falsified else pair[0]
            other_value = other.value_under(value_of(other.variable))
            if other_value is True:
                continue

            replacement = self._replacement(clause, pair, value_of)
            if replacement is not None:
                self._move(clause, falsified, replacement)
                continue

            if other_value is None:
                yield clause, ClauseState.UNIT, other
            else:
                yield clause, ClauseState.UNSATISFIED, None

    @staticmethod
    def _replacement(
        clause: Clause, pair: list[Literal], value_of: ValueOf
    ) -> Literal | None:
        for lit in clause.literals:
            if lit in pair:
                continue
            if lit.value_under(value_of(lit.variable)) is not False:
                return lit
        return None

    def _move(self, clause: Clause, old: Literal, new: Literal) -> None:
        pair = self._watched[clause]
        pair[pair.index(old)] = new
        self._watchers[old].remove(clause)
        self._watchers[new].append(clause)

    def check(self) -> None:
        """Verify that every indexed clause has two distinct watches.

        Raises:
            SolverInvariantError: If the index and the watch pairs disagree.
        """
        for clause, pair in self._watched.items():
            if len(pair) != 2 or pair[0] == pair[1]:
                raise SolverInvariantError(f"{clause!r} has watches {pair}")
            for lit in pair:
                if lit not in clause.literals or clause not in self._watchers[lit]:
                    raise SolverInvariantError(
                        f"{clause!r} watch on {lit} is not indexed"
                    )
