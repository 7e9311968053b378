"""Tests for the assignment trail and its invariants."""

from __future__ import annotations

import pytest

from satlock.core.sat import Assignment, AssignmentKind, Trail, Variable
from satlock.exceptions import SolverInvariantError

VARS = [Variable("p", f"{i}.0", i) for i in range(6)]


def _decide(trail: Trail, var: Variable, value: bool = True) -> None:
    trail.push(Assignment(var, value, trail.level + 1, AssignmentKind.DECISION))


def _propagate(trail: Trail, var: Variable, value: bool = False) -> None:
    trail.push(Assignment(var, value, trail.level, AssignmentKind.PROPAGATED))


class TestTrailPush:
    """Pushing entries onto the trail."""

    def test_levels_follow_decisions(self) -> None:
        trail = Trail()
        trail.push(Assignment(VARS[0], True, 0, AssignmentKind.FACT))
        assert trail.level == 0
        _decide(trail, VARS[1])
        _propagate(trail, VARS[2])
        assert trail.level == 1
        assert trail.max_level == 1
        assert trail.value(VARS[2]) is False
        assert trail.value(VARS[3]) is None
        assert trail.decision_at(1).variable == VARS[1]

    def test_double_assignment_is_a_defect(self) -> None:
        trail = Trail()
        _decide(trail, VARS[0])
        with pytest.raises(SolverInvariantError, match="assigned twice"):
            _propagate(trail, VARS[0])

    def test_wrong_level_is_a_defect(self) -> None:
        trail = Trail()
        with pytest.raises(SolverInvariantError, match="expected level 1"):
            trail.push(Assignment(VARS[0], True, 2, AssignmentKind.DECISION))
        with pytest.raises(SolverInvariantError, match="expected level 0"):
            trail.push(Assignment(VARS[0], False, 1, AssignmentKind.PROPAGATED))

    def test_decision_at_out_of_range(self) -> None:
        with pytest.raises(SolverInvariantError):
            Trail().decision_at(1)

    def test_propagation_queue(self) -> None:
        trail = Trail()
        _decide(trail, VARS[0])
        _propagate(trail, VARS[1])
        assert trail.next_unpropagated().variable == VARS[0]
        assert trail.next_unpropagated().variable == VARS[1]
        assert trail.next_unpropagated() is None


class TestTrailBacktrack:
    """Backtracking removes exactly the entries above the target level."""

    def _three_levels(self) -> Trail:
        trail = Trail()
        trail.push(Assignment(VARS[0], True, 0, AssignmentKind.FACT))
        _decide(trail, VARS[1])
        _propagate(trail, VARS[2])
        _decide(trail, VARS[3])
        _decide(trail, VARS[4])
        _propagate(trail, VARS[5])
        return trail

    def test_backtrack_keeps_lower_levels(self) -> None:
        trail = self._three_levels()
        removed = trail.backtrack(1)
        assert [e.variable for e in removed] == [VARS[3], VARS[4], VARS[5]]
        assert removed[0].is_decision
        assert trail.level == 1
        assert [e.variable for e in trail] == [VARS[0], VARS[1], VARS[2]]
        assert all(e.level <= 1 for e in trail)
        for var in VARS[3:]:
            assert trail.value(var) is None
        trail.check()

    def test_backtrack_to_zero(self) -> None:
        trail = self._three_levels()
        trail.backtrack(0)
        assert [e.variable for e in trail] == [VARS[0]]
        assert trail.level == 0

    def test_backtrack_resets_propagation_head(self) -> None:
        trail = self._three_levels()
        while trail.next_unpropagated() is not None:
            pass
        trail.backtrack(1)
        assert trail.next_unpropagated() is None
        _propagate(trail, VARS[3])
        assert trail.next_unpropagated().variable == VARS[3]

    @pytest.mark.parametrize("level", [-1, 3, 4])
    def test_backtrack_out_of_range(self, level: int) -> None:
        trail = self._three_levels()
        with pytest.raises(SolverInvariantError, match="Cannot backtrack"):
            trail.backtrack(level)

    def test_reassign_after_backtrack(self) -> None:
        trail = self._three_levels()
        trail.backtrack(1)
        trail.push(Assignment(VARS[3], False, 1, AssignmentKind.FLIPPED))
        assert trail.value(VARS[3]) is False
        trail.check()
