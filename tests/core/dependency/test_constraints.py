"""Tests for version parsing, ordering, and constraint satisfaction.

Validates exact match (==), range (>=, <=, >, <), not-equal (!=), caret
(^), tilde (~), wildcard (*), and compound comma-separated constraints
against version strings of one to three components.
"""

from __future__ import annotations

import pytest

from satlock.core.dependency import VersionConstraint
from satlock.core.versions import is_valid_version, parse_version, version_key


class TestVersions:
    """Parsing and ordering of version strings."""

    @pytest.mark.parametrize("raw, expected", [
        ("1", (1, 0, 0)),
        ("1.2", (1, 2, 0)),
        ("1.2.3", (1, 2, 3)),
        ("v2.0.1", (2, 0, 1)),
        ("1.0.0-beta.2+build.7", (1, 0, 0)),
    ])
    def test_parse(self, raw: str, expected: tuple[int, int, int]) -> None:
        assert parse_version(raw) == expected

    @pytest.mark.parametrize("raw", ["", "1.2.3.4", "01.0", "latest", "1..2"])
    def test_parse_rejects(self, raw: str) -> None:
        assert not is_valid_version(raw)
        with pytest.raises(ValueError, match="Invalid version"):
            parse_version(raw)

    def test_ordering(self) -> None:
        versions = ["1.10.0", "1.2.0", "1.0.0-rc.1", "1.0.0", "1.0.0-alpha", "0.9"]
        assert sorted(versions, key=version_key) == [
            "0.9", "1.0.0-alpha", "1.0.0-rc.1", "1.0.0", "1.2.0", "1.10.0",
        ]

    def test_missing_components_equal(self) -> None:
        assert version_key("1.0") == version_key("1.0.0")

    def test_unparseable_sorts_lowest(self) -> None:
        assert version_key("nightly") < version_key("0.0.1")


class TestVersionConstraint:
    """Tests for VersionConstraint parsing and the ``satisfies()`` method."""

    def test_exact_match_satisfies(self) -> None:
        """Exact match ==1.0.0 satisfies only 1.0.0."""
        vc = VersionConstraint("==1.0.0")
        assert vc.satisfies("1.0.0") is True
        assert vc.satisfies("1.0") is True
        assert vc.satisfies("1.0.1") is False

    def test_bare_version_is_exact(self) -> None:
        vc = VersionConstraint("1.2.0")
        assert vc.satisfies("1.2.0") is True
        assert vc.satisfies("1.2.1") is False

    def test_range_operators(self) -> None:
        assert VersionConstraint(">=1.0.0").satisfies("1.0.0") is True
        assert VersionConstraint(">1.0.0").satisfies("1.0.0") is False
        assert VersionConstraint("<=2.0.0").satisfies("2.0.0") is True
        assert VersionConstraint("<2.0.0").satisfies("2.0.0") is False
        assert VersionConstraint("!=1.0.0").satisfies("1.0.1") is True

    def test_caret_constraint(self) -> None:
        """^1.2.0 keeps the major version; ^0.2.0 keeps the minor too."""
        assert VersionConstraint("^1.2.0").satisfies("1.9.0") is True
        assert VersionConstraint("^1.2.0").satisfies("2.0.0") is False
        assert VersionConstraint("^1.2.0").satisfies("1.1.9") is False
        assert VersionConstraint("^0.2.0").satisfies("0.2.5") is True
        assert VersionConstraint("^0.2.0").satisfies("0.3.0") is False

    def test_tilde_constraint(self) -> None:
        assert VersionConstraint("~1.2.0").satisfies("1.2.9") is True
        assert VersionConstraint("~1.2.0").satisfies("1.3.0") is False

    def test_wildcard(self) -> None:
        assert VersionConstraint("*").satisfies("0.0.1") is True
        VersionConstraint("*").validate()

    def test_compound_constraint(self) -> None:
        """All comma-separated atoms must hold."""
        vc = VersionConstraint(">=1.0.0, <2.0.0, !=1.5.0")
        assert vc.satisfies("1.4.0") is True
        assert vc.satisfies("1.5.0") is False
        assert vc.satisfies("2.0.0") is False

    @pytest.mark.parametrize("raw", ["", ">>1.0", "=>1.0", "1.0, <", "~", "1.0 || 2.0"])
    def test_validate_rejects(self, raw: str) -> None:
        with pytest.raises(ValueError):
            VersionConstraint(raw).validate()

    def test_satisfies_rejects_bad_version(self) -> None:
        with pytest.raises(ValueError):
            VersionConstraint(">=1.0").satisfies("banana")

    def test_prerelease_precedence(self) -> None:
        assert VersionConstraint("<1.0.0").satisfies("1.0.0-rc.1") is True
        assert VersionConstraint("==1.0.0").satisfies("1.0.0-rc.1") is False
        assert VersionConstraint("==1.0.0").satisfies("1.0.0+build.5") is True
