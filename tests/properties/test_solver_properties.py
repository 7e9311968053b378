"""Property-based tests for the resolution engine.

Verifies on randomly generated requirement sets:
- Completeness: the solver is satisfiable exactly when an independent SAT
  solver (Glucose, via python-sat) is.
- Soundness: every reported installation meets every requirement and
  incompatibility with one version per package.
- Conflict sets: the clauses named in a diagnosis are unsatisfiable on
  their own.
- Determinism: the same input always yields the same outcome.
- Budgets: any decision budget yields either the normal outcome or a
  cancellation, and cancellation leaves nothing behind.
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
from pysat.solvers import Glucose3

from satlock.core.sat import (
    Clause,
    RequirementSet,
    Solver,
    SolverState,
    encode,
)

# ---------------------------------------------------------------------------
# Strategies for generating random requirement sets
# ---------------------------------------------------------------------------

PACKAGES = ["alpha", "beta", "gamma", "delta"]
VERSIONS = ["1.0", "1.1", "2.0"]


@st.composite
def requirement_sets(draw: st.DrawFn) -> RequirementSet:
    """Generate a requirement set over up to four packages."""
    index = {
        name: draw(st.lists(st.sampled_from(VERSIONS), min_size=1, max_size=3, unique=True))
        for name in PACKAGES
    }
    candidates = st.sampled_from([(n, v) for n, vs in index.items() for v in vs])

    def some_versions(package: str):
        return st.lists(st.sampled_from(index[package]), min_size=1, unique=True)

    reqs = RequirementSet()
    for _ in range(draw(st.integers(min_value=1, max_value=2))):
        package = draw(st.sampled_from(PACKAGES))
        reqs.require(package, draw(some_versions(package)))
    for _ in range(draw(st.integers(min_value=0, max_value=6))):
        dependent = draw(candidates)
        package = draw(st.sampled_from(PACKAGES))
        reqs.require(package, draw(some_versions(package)), dependent=dependent)
    for _ in range(draw(st.integers(min_value=0, max_value=3))):
        first = draw(candidates)
        other = draw(st.one_of(st.none(), candidates))
        reqs.exclude(first[0], first[1], other=other)
    return reqs


def _oracle_satisfiable(clauses: tuple[Clause, ...] | list[Clause]) -> bool:
    cnf = [
        [(lit.variable.index + 1) * (1 if lit.positive else -1) for lit in clause.literals]
        for clause in clauses
    ]
    with Glucose3(bootstrap_with=cnf) as oracle:
        return oracle.solve()


# ---------------------------------------------------------------------------
# Completeness and soundness
# ---------------------------------------------------------------------------


class TestAgainstOracle:
    """The solver agrees with an independent SAT solver."""

    @given(reqs=requirement_sets())
    @settings(max_examples=150)
    def test_same_satisfiability(self, reqs: RequirementSet) -> None:
        formula = encode(reqs)
        result = Solver(formula).solve()
        assert result.state in (SolverState.SATISFIED, SolverState.UNSATISFIABLE)
        assert result.satisfied == _oracle_satisfiable(formula.clauses)

    @given(reqs=requirement_sets())
    @settings(max_examples=100)
    def test_conflict_set_is_unsatisfiable(self, reqs: RequirementSet) -> None:
        result = Solver(encode(reqs)).solve()
        if result.state is SolverState.UNSATISFIABLE:
            assert result.conflict.clauses
            assert not _oracle_satisfiable(result.conflict.clauses)


class TestSoundness:
    """Installations meet every constraint of the input."""

    @given(reqs=requirement_sets())
    @settings(max_examples=100)
    def test_model_meets_requirements(self, reqs: RequirementSet) -> None:
        result = Solver(encode(reqs)).solve()
        if not result.satisfied:
            return
        installed = result.model
        for req in reqs.requirements:
            active = req.dependent is None or installed.get(req.dependent[0]) == req.dependent[1]
            if active:
                assert installed.get(req.package) in req.candidates
        for inc in reqs.incompatibilities:
            if inc.other is None:
                assert installed.get(inc.package) != inc.version
            elif installed.get(inc.package) == inc.version:
                assert installed.get(inc.other[0]) != inc.other[1]

    @given(reqs=requirement_sets())
    @settings(max_examples=50)
    def test_only_demanded_packages_installed(self, reqs: RequirementSet) -> None:
        result = Solver(encode(reqs)).solve()
        if not result.satisfied:
            return
        demanded = {r.package for r in reqs.requirements}
        assert set(result.model) <= demanded


class TestDeterminismAndBudgets:
    """Repeatability and cooperative cancellation."""

    @given(reqs=requirement_sets())
    @settings(max_examples=50)
    def test_deterministic(self, reqs: RequirementSet) -> None:
        formula = encode(reqs)
        first = Solver(formula).solve()
        second = Solver(formula).solve()
        assert first.state is second.state
        assert first.model == second.model
        assert first.stats.as_dict() == second.stats.as_dict()

    @given(reqs=requirement_sets(), budget=st.integers(min_value=0, max_value=4))
    @settings(max_examples=50)
    def test_budget_cancels_or_completes(self, reqs: RequirementSet, budget: int) -> None:
        formula = encode(reqs)
        unlimited = Solver(formula).solve()
        limited = Solver(formula, max_decisions=budget).solve()
        if limited.state is SolverState.CANCELLED:
            assert limited.model == {}
            assert unlimited.stats.decisions > budget
        else:
            assert limited.state is unlimited.state
            assert limited.model == unlimited.model
