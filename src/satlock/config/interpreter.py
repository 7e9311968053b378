"""Manifest interpreter: structural validation with breadcrumbs.

The interpreter walks a parsed manifest and records every problem it
finds together with the path to the offending entry, so that one run
reports all mistakes at once::

    index > web > 2.0.0 > requires > lib: Invalid constraint atom: '>>1'

``None`` is accepted wherever a value is optional: it is the overlay
reset value and means "use the default".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from satlock.core.dependency.constraints import VersionConstraint
from satlock.core.versions import is_valid_version

Breadcrumb = list[str]

_TOP_LEVEL_KEYS = ("name", "version", "requires", "pins", "settings", "index")
_SETTINGS_KEYS = ("max_decisions", "lockfile")
_NODE_KEYS = ("requires", "conflicts")


@dataclass(frozen=True)
class ConfigIssue:
    """One problem found in a manifest.

    Attributes:
        breadcrumb: Keys leading to the offending entry.
        message: What is wrong with it.
    """

    breadcrumb: tuple[str, ...]
    message: str

    def __str__(self) -> str:
        where = " > ".join(self.breadcrumb) if self.breadcrumb else "<manifest>"
        return f"{where}: {self.message}"


class Interpreter:
    """Collects ``ConfigIssue`` entries for a manifest document."""

    def __init__(self) -> None:
        self.issues: list[ConfigIssue] = []

    def report(self, breadcrumb: Breadcrumb, message: str) -> None:
        self.issues.append(ConfigIssue(tuple(breadcrumb), message))

    def interpret(self, data: Any) -> list[ConfigIssue]:
        """Interpret a whole manifest.

        Args:
            data: The parsed YAML document, with an ``index`` path already
                replaced by the referenced file's content.

        Returns:
            Every issue found, in document order.
        """
        if not isinstance(data, dict):
            self.report([], "The manifest must be a mapping.")
            return self.issues

        if "name" not in data:
            self.report([], 'The "name" key is required.')

        for key, value in data.items():
            handler = self._top_level_handlers().get(key)
            if handler is None:
                self.report(
                    [str(key)],
                    f'The unknown "{key}" key must be one of: '
                    + ", ".join(f'"{k}"' for k in _TOP_LEVEL_KEYS) + ".",
                )
                continue
            handler([str(key)], value)
        return self.issues

    def _top_level_handlers(self) -> dict[str, Callable[[Breadcrumb, Any], None]]:
        return {
            "name": self.interpret_name,
            "version": self.interpret_version,
            "requires": self.interpret_constraints,
            "pins": self.interpret_pins,
            "settings": self.interpret_settings,
            "index": self.interpret_index,
        }

    # -- Entries -------------------------------------------------------------

    def interpret_name(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        if not isinstance(entry, str) or not entry.strip():
            self.report(breadcrumb, "The value must be a non-empty string.")

    def interpret_version(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        # overlay reset value
        if entry is None:
            return
        if not isinstance(entry, str):
            self.report(breadcrumb, "The version must be a quoted string.")
        elif not is_valid_version(entry):
            self.report(breadcrumb, f"Invalid version: {entry!r}")

    def interpret_constraints(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        if entry is None:
            return
        if not isinstance(entry, dict):
            self.report(breadcrumb, "The value must be a mapping of package names to constraints.")
            return
        for package, constraint in entry.items():
            crumb = [*breadcrumb, str(package)]
            if not isinstance(constraint, str):
                self.report(crumb, "The constraint must be a quoted string.")
                continue
            try:
                VersionConstraint(constraint).validate()
            except ValueError as exc:
                self.report(crumb, str(exc))

    def interpret_pins(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        if entry is None:
            return
        if not isinstance(entry, dict):
            self.report(breadcrumb, "The value must be a mapping of package names to versions.")
            return
        for package, version in entry.items():
            self.interpret_version([*breadcrumb, str(package)], version)
            if version is None:
                self.report([*breadcrumb, str(package)], "A pin needs a version.")

    def interpret_settings(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        if entry is None:
            return
        if not isinstance(entry, dict):
            self.report(breadcrumb, "The value must be a mapping.")
            return
        for key, value in entry.items():
            crumb = [*breadcrumb, str(key)]
            if key == "max_decisions":
                if value is not None and (
                    isinstance(value, bool) or not isinstance(value, int) or value < 0
                ):
                    self.report(crumb, "The value must be a non-negative integer.")
            elif key == "lockfile":
                if value is not None and (not isinstance(value, str) or not value):
                    self.report(crumb, "The value must be a file name string.")
            else:
                self.report(
                    crumb,
                    f'The unknown "{key}" key must be one of: '
                    + ", ".join(f'"{k}"' for k in _SETTINGS_KEYS) + ".",
                )

    def interpret_index(self, breadcrumb: Breadcrumb, entry: Any) -> None:
        if entry is None:
            return
        if isinstance(entry, str):
            self.report(breadcrumb, f"The index file {entry!r} was not loaded.")
            return
        if not isinstance(entry, dict):
            self.report(breadcrumb, "The value must be a mapping or an index file path.")
            return
        for package, versions in entry.items():
            crumb = [*breadcrumb, str(package)]
            if not isinstance(versions, dict):
                self.report(crumb, "The value must be a mapping of versions.")
                continue
            for version, node in versions.items():
                self.interpret_node([*crumb, str(version)], version, node)

    def interpret_node(self, breadcrumb: Breadcrumb, version: Any, node: Any) -> None:
        self.interpret_version(breadcrumb, version)
        if node is None:
            return
        if not isinstance(node, dict):
            self.report(breadcrumb, 'The value must be a mapping with "requires" or "conflicts".')
            return
        for key, value in node.items():
            if key in _NODE_KEYS:
                self.interpret_constraints([*breadcrumb, str(key)], value)
            else:
                self.report(
                    [*breadcrumb, str(key)],
                    f'The unknown "{key}" key must be "requires" or "conflicts".',
                )


def interpret(data: Any) -> list[ConfigIssue]:
    """Interpret a manifest document and return every issue found."""
    return Interpreter().interpret(data)
