"""Resolution settings and their overlay.

Settings come in layers, lowest first: built-in defaults, the manifest's
``settings`` section, then command-line overrides. A later layer wins; a
``None`` value in a layer resets the key to its default.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

DEFAULT_LOCKFILE = "satlock-lock.json"


@dataclass(frozen=True)
class Settings:
    """Effective settings of one run.

    Attributes:
        max_decisions: Decision budget for the solver, or None for no
            budget.
        lockfile: Lockfile name, relative to the manifest directory.
    """

    max_decisions: int | None = None
    lockfile: str = DEFAULT_LOCKFILE

    def overlay(self, *layers: dict[str, Any] | None) -> Settings:
        """Apply *layers* on top of these settings.

        Unknown keys are ignored here; the manifest interpreter reports
        them.

        Returns:
            A new ``Settings``.
        """
        defaults = Settings()
        names = {f.name for f in fields(self)}
        result = self
        for layer in layers:
            for key, value in (layer or {}).items():
                if key not in names:
                    continue
                if value is None:
                    value = getattr(defaults, key)
                result = replace(result, **{key: value})
        return result
