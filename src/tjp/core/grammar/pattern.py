"""
Grammar tokens and patterns.

A pattern is one alternative of a rule: an ordered sequence of token specs
plus an optional semantic action and its documentation. Token specs are a
closed union of :class:`Literal`, :class:`Terminal` and :class:`Nonterminal`.
Grammar definitions write them in a compact notation::

    _task       literal keyword 'task'
    $STRING     typed terminal of kind STRING
    !taskBody   reference to the rule 'taskBody'
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..errors import GrammarDefinitionError
from ..tokens import TokenKind

if TYPE_CHECKING:
    from ..context import ParseContext

Action = Callable[[list[Any], "ParseContext"], Any]


@dataclass(frozen=True)
class Literal:
    """A keyword or punctuation that must appear verbatim."""

    text: str

    def __str__(self) -> str:
        return f"_{self.text}"


@dataclass(frozen=True)
class Terminal:
    """A typed token such as an INTEGER or a DATE."""

    kind: TokenKind

    def __str__(self) -> str:
        return f"${self.kind.value}"


@dataclass(frozen=True)
class Nonterminal:
    """A reference to another rule, resolved by name at match time."""

    rule_name: str

    def __str__(self) -> str:
        return f"!{self.rule_name}"


TokenSpec = Literal | Terminal | Nonterminal


def parse_token_spec(spec: str | TokenSpec) -> TokenSpec:
    """Convert the compact ``_x`` / ``$KIND`` / ``!rule`` notation."""
    if isinstance(spec, (Literal, Terminal, Nonterminal)):
        return spec
    if len(spec) < 2:
        raise GrammarDefinitionError(f"Malformed token spec '{spec}'", "bad_token_spec")
    prefix, body = spec[0], spec[1:]
    if prefix == "_":
        return Literal(body)
    if prefix == "$":
        try:
            return Terminal(TokenKind[body])
        except KeyError:
            raise GrammarDefinitionError(
                f"Unknown terminal kind '{body}'", "bad_token_spec"
            ) from None
    if prefix == "!":
        return Nonterminal(body)
    raise GrammarDefinitionError(f"Malformed token spec '{spec}'", "bad_token_spec")


@dataclass(frozen=True)
class ArgumentDoc:
    """
    Documentation of one pattern argument.

    Attributes:
        name: Argument name shown in the syntax line, e.g. ``id``
        text: Description; a leading ``^`` makes it a reference to another keyword
        type_spec: Type shown next to the name, e.g. ``<integer>``; empty for none
    """

    name: str
    text: str
    type_spec: str = ""

    @property
    def reference(self) -> str | None:
        """Keyword referenced by a ``^keyword`` description, if any."""
        if self.text.startswith("^"):
            return self.text[1:]
        return None


@dataclass(eq=False)
class Pattern:
    """
    One alternative production of a rule.

    Patterns compare by identity; the documentation pass uses them as
    dictionary keys.
    """

    tokens: tuple[TokenSpec, ...]
    action: Action | None = None
    keyword: str | None = None
    doc: str | None = None
    args: dict[int, ArgumentDoc] = field(default_factory=dict)
    see_also: set[str] = field(default_factory=set)
    inheritable: bool = False

    @classmethod
    def from_specs(cls, specs: Sequence[str | TokenSpec], action: Action | None = None) -> Pattern:
        tokens = tuple(parse_token_spec(spec) for spec in specs)
        if not tokens:
            raise GrammarDefinitionError("A pattern needs at least one token", "empty_pattern")
        return cls(tokens=tokens, action=action)

    @property
    def first(self) -> TokenSpec:
        return self.tokens[0]

    def __str__(self) -> str:
        return " ".join(str(token) for token in self.tokens)

    def __repr__(self) -> str:
        return f"Pattern({self})"
