"""
Grammar rules.

A rule is a named nonterminal with an ordered list of alternative patterns.
Rules stay mutable after creation: patterns can be appended later, and every
pattern that refers to the rule by name sees the addition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .pattern import Pattern, TokenSpec


class ListKind(Enum):
    """Shape of rules created by the list combinators."""

    WHITESPACE = "whitespace"
    COMMA = "comma"


@dataclass(eq=False)
class Rule:
    """
    A named grammar nonterminal.

    Attributes:
        name: Unique rule name
        patterns: Alternatives, tried by single-token lookahead
        optional: The rule may match nothing
        repeatable: The rule may match consecutively; results are collected
        options_body: For brace blocks, the name of the rule inside the braces
        list_kind: For derived lists, whether elements are comma separated
        list_element: For derived lists, the element token
    """

    name: str
    patterns: list[Pattern] = field(default_factory=list)
    optional: bool = False
    repeatable: bool = False
    options_body: str | None = None
    list_kind: ListKind | None = None
    list_element: TokenSpec | None = None

    def empty_result(self) -> list | None:
        """Value of an optional rule that matched nothing."""
        return [] if self.repeatable or self.list_kind is not None else None

    def __repr__(self) -> str:
        flags = "".join(
            flag for flag, on in (("?", self.optional), ("*", self.repeatable)) if on
        )
        return f"Rule({self.name}{flags}, {len(self.patterns)} patterns)"
