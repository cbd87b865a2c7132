"""
Recursive-descent matching engine.

The engine walks a :class:`~tjp.core.grammar.Registry` against a token
stream with one token of lookahead. For every rule it selects the single
alternative whose first set contains the lookahead token, matches that
pattern's tokens left to right and finally runs the pattern's action. There
is no backtracking: once a pattern is selected it must match.
"""

from __future__ import annotations

import logging
from typing import Any

from .context import ParseContext
from .errors import ParseError, TjpError, make_parse_error
from .grammar import Literal, Nonterminal, Pattern, Registry, Rule, Terminal, coerce
from .grammar.registry import describe_first_key
from .scanner import Scanner
from .tokens import LITERAL_KINDS, Token, TokenKind

logger = logging.getLogger(__name__)


class TokenStream:
    """
    Single-token lookahead over a scanner.

    The next token is only read from the scanner when it is peeked, so an
    action that switches the scanner's input (``include``) or defines a
    macro takes effect for the token right after its pattern.
    """

    def __init__(self, scanner: Scanner):
        self.scanner = scanner
        self._lookahead: Token | None = None
        self.consumed = 0

    def peek(self) -> Token:
        if self._lookahead is None:
            self._lookahead = self.scanner.next_token()
        return self._lookahead

    def advance(self) -> Token:
        token = self.peek()
        self._lookahead = None
        self.consumed += 1
        return token


class Parser:
    """
    Matches the rules of a registry against a token stream.

    Args:
        registry: Grammar to match
        stream: Token source
        context: Ambient state passed to every action
    """

    def __init__(self, registry: Registry, stream: TokenStream, context: ParseContext):
        self.registry = registry
        self.stream = stream
        self.context = context

    def parse(self, rule_name: str) -> Any:
        """Match ``rule_name`` against the whole input."""
        result = self.match_rule(self.registry[rule_name])
        token = self.stream.peek()
        if token.kind != TokenKind.EOF:
            raise self._error(token, f"Unexpected {token.describe()} after end of input", "trailing_input")
        return result

    # ------------------------------------------------------------------
    # Rules and patterns
    # ------------------------------------------------------------------

    def match_rule(self, rule: Rule) -> Any:
        if not rule.repeatable:
            pattern = self._select(rule)
            if pattern is None:
                if rule.optional:
                    return self._empty_result(rule)
                raise self._unexpected(rule)
            return self._match_pattern(pattern)

        results: list[Any] = []
        while True:
            pattern = self._select(rule)
            if pattern is None:
                if results or rule.optional:
                    return results
                raise self._unexpected(rule)
            before = self.stream.consumed
            results.append(self._match_pattern(pattern))
            if self.stream.consumed == before:
                return results

    def _empty_result(self, rule: Rule) -> Any:
        """
        Value of an optional rule that matched nothing.

        A wrapper whose only alternative is a bare reference to another rule
        is empty the way its target is, so an optional wrapper around a list
        yields an empty list.
        """
        seen: set[str] = set()
        while (
            not rule.repeatable
            and rule.list_kind is None
            and len(rule.patterns) == 1
            and rule.patterns[0].action is None
            and len(rule.patterns[0].tokens) == 1
            and isinstance(rule.patterns[0].first, Nonterminal)
            and rule.name not in seen
        ):
            seen.add(rule.name)
            rule = self.registry[rule.patterns[0].first.rule_name]
        return rule.empty_result()

    def _select(self, rule: Rule) -> Pattern | None:
        token = self.stream.peek()
        # Keywords take precedence over typed terminals of the same token.
        if token.kind in LITERAL_KINDS:
            key = ("lit", token.value)
            for pattern in rule.patterns:
                if key in self.registry.first_set(pattern):
                    return pattern
        key = ("kind", token.kind)
        for pattern in rule.patterns:
            if key in self.registry.first_set(pattern):
                return pattern
        return None

    def _match_pattern(self, pattern: Pattern) -> Any:
        first = self.stream.peek()
        values: list[Any] = []
        for spec in pattern.tokens:
            if isinstance(spec, Literal):
                values.append(self._expect_literal(spec).value)
            elif isinstance(spec, Terminal):
                values.append(coerce(self._expect_terminal(spec)))
            elif isinstance(spec, Nonterminal):
                values.append(self.match_rule(self.registry[spec.rule_name]))

        if pattern.action is None:
            return values[0] if len(values) == 1 else values
        self.context.location = first.location
        try:
            return pattern.action(values, self.context)
        except TjpError as e:
            if e.context is not None:
                raise
            # Errors raised by the domain model carry no position.
            raise type(e)(
                e.message, e.code, self.context.error_context(), e.property or self.context.property
            ) from None

    def _expect_literal(self, spec: Literal) -> Token:
        token = self.stream.peek()
        if token.kind not in LITERAL_KINDS or token.value != spec.text:
            raise self._error(
                token, f"Expected '{spec.text}' but found {token.describe()}", "unexpected_token"
            )
        return self.stream.advance()

    def _expect_terminal(self, spec: Terminal) -> Token:
        token = self.stream.peek()
        if token.kind != spec.kind:
            raise self._error(
                token,
                f"Expected {spec.kind.value} but found {token.describe()}",
                "unexpected_token",
            )
        return self.stream.advance()

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _unexpected(self, rule: Rule) -> ParseError:
        token = self.stream.peek()
        expected = sorted(describe_first_key(key) for key in self.registry.rule_first_set(rule))
        return self._error(
            token,
            f"Unexpected {token.describe()}; expected one of {', '.join(expected)}",
            "unexpected_token",
        )

    def _error(self, token: Token, message: str, code: str) -> ParseError:
        loc = token.location
        return make_parse_error(message, code, loc.file, loc.line, loc.column, self.context.property)
