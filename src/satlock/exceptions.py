"""satlock exception hierarchy.

All public exceptions inherit from SatlockError, giving callers a single
base class to catch when they want to handle any satlock-specific failure
without swallowing unrelated errors.

An unsatisfiable requirement set and a cancelled search are *not*
exceptions: they are ordinary outcomes reported through ``Resolution``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from satlock.config.interpreter import ConfigIssue
    from satlock.core.sat.encoding import Requirement


class SatlockError(Exception):
    """Base exception for all satlock errors."""


class MalformedConstraintError(SatlockError):
    """Raised when a requirement can never be satisfied by any candidate.

    This is a structural failure of the input, detected while building
    clauses and before any search step runs.

    Attributes:
        requirement: The offending requirement (no candidate versions).
    """

    def __init__(self, requirement: Requirement) -> None:
        self.requirement = requirement
        super().__init__(
            f"Requirement {requirement.describe()} has no candidate versions"
        )


class SolverInvariantError(SatlockError):
    """Raised when the solver detects corruption of its own state.

    Covers trail/level mismatches and double assignments. This is a
    defect, never a resolution outcome, and is not caught by the resolver.
    """


class ResolutionError(SatlockError):
    """Raised when a successful resolution was required but not obtained.

    Covers building a lockfile from an unsatisfiable or cancelled
    resolution.
    """


class LockfileError(SatlockError):
    """Raised for lockfile read or integrity failures.

    Covers unreadable files, invalid JSON and lockfiles that do not match
    the manifest they were generated from.
    """


class ConfigError(SatlockError):
    """Raised when a manifest or settings layer is invalid.

    Attributes:
        issues: Every problem found, each with its breadcrumb path.
    """

    def __init__(self, issues: list[ConfigIssue]) -> None:
        self.issues = list(issues)
        lines = [str(issue) for issue in self.issues]
        super().__init__(
            f"{len(lines)} configuration problem(s):\n" + "\n".join(lines)
        )
