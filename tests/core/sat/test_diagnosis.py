"""Tests for conflict diagnosis of unsatisfiable requirement sets."""

from __future__ import annotations

from satlock.core.sat import (
    ConflictDiagnoser,
    Incompatibility,
    Requirement,
    RequirementSet,
    SingleVersion,
    Solver,
    SolverState,
    encode,
)


class TestConflictSet:
    """The conflict set names the constraints behind a contradiction."""

    def test_unrelated_requirements_excluded(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0"])
        unrelated = reqs.require("Z", ["1.0"])
        reqs.exclude("A", "1.0", reason="yanked")
        result = Solver(encode(reqs)).solve()
        assert result.state is SolverState.UNSATISFIABLE
        assert unrelated not in result.conflict.origins
        assert result.conflict.describe() == [
            "root requires A '*'",
            "A@1.0 cannot be installed: yanked",
        ]

    def test_origins_in_encoding_order_without_duplicates(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0"])
        reqs.require("B", ["1.0"], dependent=("A", "1.0"))
        reqs.require("B", ["2.0"], dependent=("A", "1.0"))
        reqs.require("B", ["3.0"], dependent=("A", "1.0"))
        result = Solver(encode(reqs)).solve()
        conflict = result.conflict
        assert [c.index for c in conflict.clauses] == sorted(c.index for c in conflict.clauses)
        assert len(set(map(id, conflict.origins))) == len(conflict.origins)
        kinds = {type(o) for o in conflict.origins}
        assert kinds == {Requirement, SingleVersion}

    def test_requirements_filter(self) -> None:
        reqs = RequirementSet()
        root = reqs.require("A", ["1.0"])
        reqs.exclude("A", "1.0")
        conflict = Solver(encode(reqs)).solve().conflict
        assert conflict.requirements == (root,)
        assert any(isinstance(o, Incompatibility) for o in conflict.origins)

    def test_implicated_stops_at_decisions(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0", "2.0"])
        reqs.require("B", ["1.0"], dependent=("A", "2.0"))
        formula = encode(reqs)
        solver = Solver(formula)
        assert solver.solve().satisfied
        b_clause = formula.clauses[1]
        found = ConflictDiagnoser(solver.trail).implicated(b_clause)
        # A@2.0 was a decision: nothing beyond the clause itself is implicated
        assert found == {b_clause}
