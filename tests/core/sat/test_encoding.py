"""Tests for clause construction from requirement sets."""

from __future__ import annotations

import pytest

from satlock.core.sat import (
    Incompatibility,
    Requirement,
    RequirementSet,
    SingleVersion,
    encode,
)
from satlock.exceptions import MalformedConstraintError


class TestRequirementClauses:
    """One clause per requirement."""

    def test_root_requirement_lists_candidates(self) -> None:
        reqs = RequirementSet()
        req = reqs.require("B", ["1.0", "2.0"])
        formula = encode(reqs)
        clause = formula.clauses[0]
        assert clause.origin is req
        assert [str(lit) for lit in clause.literals] == ["B@1.0", "B@2.0"]

    def test_conditional_requirement_has_negated_dependent(self) -> None:
        reqs = RequirementSet()
        reqs.require("B", ["1.0"], dependent=("A", "1.0"))
        clause = encode(reqs).clauses[0]
        assert [str(lit) for lit in clause.literals] == ["!A@1.0", "B@1.0"]

    def test_duplicate_candidates_collapse(self) -> None:
        req = Requirement("B", "*", ("1.0", "1.0", "2.0"))
        assert req.candidates == ("1.0", "2.0")

    def test_self_satisfied_requirement_dropped(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0", "2.0"], dependent=("A", "1.0"))
        formula = encode(reqs)
        assert not any(isinstance(c.origin, Requirement) for c in formula.clauses)

    def test_zero_candidates_is_malformed(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0"])
        empty = reqs.require("ghost", [], constraint=">=1.0", dependent=("A", "1.0"))
        with pytest.raises(MalformedConstraintError) as excinfo:
            encode(reqs)
        assert excinfo.value.requirement is empty
        assert "A@1.0 requires ghost '>=1.0'" in str(excinfo.value)


class TestExclusionClauses:
    """Incompatibilities and the one-version-per-package rule."""

    def test_pairwise_single_version_clauses(self) -> None:
        reqs = RequirementSet()
        reqs.require("B", ["1.0", "2.0", "3.0"])
        formula = encode(reqs)
        pairs = [c for c in formula.clauses if isinstance(c.origin, SingleVersion)]
        assert len(pairs) == 3
        assert all(len(c) == 2 for c in pairs)
        assert all(not lit.positive for c in pairs for lit in c.literals)

    def test_incompatibility_clauses(self) -> None:
        reqs = RequirementSet()
        reqs.require("A", ["1.0"])
        alone = reqs.exclude("A", "1.0", reason="broken")
        pair = reqs.exclude("A", "1.0", other=("C", "1.0"))
        formula = encode(reqs)
        by_origin = {id(c.origin): c for c in formula.clauses}
        assert [str(lit) for lit in by_origin[id(alone)].literals] == ["!A@1.0"]
        assert [str(lit) for lit in by_origin[id(pair)].literals] == ["!A@1.0", "!C@1.0"]

    def test_clause_order_and_indices(self) -> None:
        reqs = RequirementSet()
        reqs.require("B", ["1.0", "2.0"])
        reqs.exclude("B", "1.0")
        formula = encode(reqs)
        kinds = [type(c.origin) for c in formula.clauses]
        assert kinds == [Requirement, Incompatibility, SingleVersion]
        assert [c.index for c in formula.clauses] == [0, 1, 2]


class TestFormula:
    """Variable bookkeeping of the encoded formula."""

    def test_packages_sorted_newest_first(self) -> None:
        reqs = RequirementSet()
        reqs.require("B", ["1.0", "10.0", "2.0"])
        formula = encode(reqs)
        assert [v.version for v in formula.packages["B"]] == ["10.0", "2.0", "1.0"]

    def test_packages_in_first_appearance_order(self) -> None:
        reqs = RequirementSet()
        reqs.require("Z", ["1.0"])
        reqs.require("A", ["1.0"], dependent=("Z", "1.0"))
        assert list(encode(reqs).packages) == ["Z", "A"]

    def test_variable_lookup(self) -> None:
        reqs = RequirementSet()
        reqs.require("B", ["1.0"])
        formula = encode(reqs)
        assert formula.variable("B", "1.0") is formula.variables[0]
        assert formula.variable("B", "9.9") is None

    def test_describe_messages(self) -> None:
        assert Requirement("B", "^1.0").describe() == "root requires B '^1.0'"
        assert Requirement("B", "==1.0", pinned=True).describe() == "pinned B '==1.0'"
        assert SingleVersion("B").describe() == "only one version of B can be installed"
        assert Incompatibility("A", "1.0", reason="no lib").describe() == (
            "A@1.0 cannot be installed: no lib"
        )
