"""Boolean variables and literals for the resolution engine.

A ``Variable`` stands for one package-version candidate: it is true when
that exact version is selected. A ``Literal`` is a variable with a
polarity; ``-lit`` yields the complementary literal.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Variable:
    """A package-version candidate under consideration.

    Equality and hashing use ``(package, version)`` only. ``index`` is the
    creation order within one encoding and drives deterministic iteration.

    Attributes:
        package: Package identifier.
        version: Version string of the candidate.
        index: Position in the encoding's variable list.
    """

    package: str
    version: str
    index: int = field(default=0, compare=False)

    @property
    def selected(self) -> Literal:
        """The literal "this version is selected"."""
        return Literal(self, True)

    @property
    def excluded(self) -> Literal:
        """The literal "this version is excluded"."""
        return Literal(self, False)

    def __str__(self) -> str:
        return f"{self.package}@{self.version}"


@dataclass(frozen=True)
class Literal:
    """A signed reference to a ``Variable``.

    Attributes:
        variable: The referenced candidate.
        positive: True for "selected", False for "excluded".
    """

    variable: Variable
    positive: bool = True

    def __neg__(self) -> Literal:
        return Literal(self.variable, not self.positive)

    def value_under(self, value: bool | None) -> bool | None:
        """Truth value of this literal given its variable's value."""
        if value is None:
            return None
        return value if self.positive else not value

    def __str__(self) -> str:
        return str(self.variable) if self.positive else f"!{self.variable}"
