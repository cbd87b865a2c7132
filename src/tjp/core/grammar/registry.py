"""
Rule & pattern registry.

The registry owns every rule of a grammar and provides the combinators that
build the common shapes (aliases, whitespace and comma separated lists,
brace-delimited option blocks). It also computes first sets for the
single-token lookahead of the matching engine.

First sets are memoized per *generation*. Every mutation bumps the
generation, so a pattern appended while a document is being parsed (see
:mod:`tjp.core.extension`) is visible to the very next dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from itertools import combinations
from typing import Any

from ..errors import AmbiguousGrammarError, DuplicateRuleError, GrammarDefinitionError
from ..tokens import TokenKind
from .pattern import Action, Literal, Nonterminal, Pattern, Terminal, TokenSpec, parse_token_spec
from .rule import ListKind, Rule

logger = logging.getLogger(__name__)

# ("lit", text) for literal keywords, ("kind", TokenKind) for typed terminals
FirstKey = tuple[str, Any]


def _identity(val: list[Any], ctx: Any) -> Any:
    return val[0]


def _second(val: list[Any], ctx: Any) -> Any:
    return val[1]


def _join_list(val: list[Any], ctx: Any) -> list[Any]:
    return [val[0], *val[1]]


def _more_name(name: str) -> str:
    return f"more{name[0].upper()}{name[1:]}"


def _is_word(text: str) -> bool:
    return text.replace("_", "a").isalnum()


class Registry:
    """Mapping from rule name to :class:`Rule`, plus the grammar combinators."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}
        self.generation = 0
        self._cache_generation = -1
        self._first_cache: dict[Pattern, frozenset[FirstKey]] = {}
        self._nullable_cache: dict[str, bool] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            raise GrammarDefinitionError(f"Unknown rule '{name}'", "unknown_rule") from None

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def patterns(self) -> Iterator[tuple[Rule, Pattern]]:
        """Iterate over all (rule, pattern) pairs."""
        for rule in self._rules.values():
            for pattern in rule.patterns:
                yield rule, pattern

    def _resolve(self, rule: Rule | str) -> Rule:
        return rule if isinstance(rule, Rule) else self[rule]

    def _touch(self) -> None:
        self.generation += 1

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def define_rule(self, name: str) -> Rule:
        """Create and register a new rule."""
        if name in self._rules:
            raise DuplicateRuleError(f"Rule '{name}' is already defined", "duplicate_rule")
        rule = Rule(name)
        self._rules[name] = rule
        self._touch()
        logger.debug("Defined rule %s", name)
        return rule

    def add_pattern(
        self,
        rule: Rule | str,
        tokens: Sequence[str | TokenSpec],
        action: Action | None = None,
    ) -> Pattern:
        """
        Append an alternative to a rule.

        Alternatives of one rule must have disjoint first-token sets. That is
        a property of a correct grammar and is verified by
        :meth:`check_first_sets`, not here.
        """
        rule = self._resolve(rule)
        pattern = Pattern.from_specs(tokens, action)
        rule.patterns.append(pattern)
        self._touch()
        return pattern

    def mark_optional(self, rule: Rule | str) -> None:
        self._resolve(rule).optional = True
        self._touch()

    def mark_repeatable(self, rule: Rule | str) -> None:
        self._resolve(rule).repeatable = True
        self._touch()

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def alias_single_pattern(self, rule: Rule | str, token: str | TokenSpec) -> Pattern:
        """One-token pattern whose result is the token's value."""
        return self.add_pattern(rule, [token], _identity)

    def derive_list_rule(self, name: str, element: str | TokenSpec) -> Rule:
        """Build ``name := element moreName?`` for whitespace separated lists."""
        return self._derive_list(name, element, ListKind.WHITESPACE)

    def derive_comma_list_rule(self, name: str, element: str | TokenSpec) -> Rule:
        """Build ``name := element (',' element)*`` for comma separated lists."""
        return self._derive_list(name, element, ListKind.COMMA)

    def _derive_list(self, name: str, element: str | TokenSpec, kind: ListKind) -> Rule:
        element_spec = self._element_spec(element)
        more = _more_name(name)

        rule = self.define_rule(name)
        rule.list_kind = kind
        rule.list_element = element_spec
        self.add_pattern(rule, [element_spec, Nonterminal(more)], _join_list)

        more_rule = self.define_rule(more)
        self.mark_optional(more_rule)
        self.mark_repeatable(more_rule)
        if kind == ListKind.COMMA:
            self.add_pattern(more_rule, [Literal(","), element_spec], _second)
        else:
            self.add_pattern(more_rule, [element_spec], _identity)
        return rule

    def derive_options_rule(self, name: str, body_rule_name: str) -> Rule:
        """Build the optional brace block ``'{' body '}'``."""
        rule = self.define_rule(name)
        rule.options_body = body_rule_name
        self.mark_optional(rule)
        self.add_pattern(rule, [Literal("{"), Nonterminal(body_rule_name), Literal("}")], _second)
        return rule

    @staticmethod
    def _element_spec(element: str | TokenSpec) -> TokenSpec:
        if isinstance(element, str) and element[:1] not in ("_", "$", "!"):
            return Nonterminal(element)
        return parse_token_spec(element)

    # ------------------------------------------------------------------
    # First sets
    # ------------------------------------------------------------------

    def _sync_caches(self) -> None:
        if self._cache_generation != self.generation:
            self._first_cache.clear()
            self._nullable_cache.clear()
            self._cache_generation = self.generation

    def first_set(self, pattern: Pattern) -> frozenset[FirstKey]:
        """Tokens that can start a match of ``pattern``."""
        self._sync_caches()
        cached = self._first_cache.get(pattern)
        if cached is None:
            cached = frozenset(self._pattern_first(pattern, set()))
            self._first_cache[pattern] = cached
        return cached

    def rule_first_set(self, rule: Rule | str) -> frozenset[FirstKey]:
        rule = self._resolve(rule)
        keys: set[FirstKey] = set()
        for pattern in rule.patterns:
            keys |= self.first_set(pattern)
        return frozenset(keys)

    def _pattern_first(self, pattern: Pattern, visiting: set[str]) -> set[FirstKey]:
        keys: set[FirstKey] = set()
        for token in pattern.tokens:
            if isinstance(token, Literal):
                keys.add(("lit", token.text))
                return keys
            if isinstance(token, Terminal):
                keys.add(("kind", token.kind))
                return keys
            rule = self[token.rule_name]
            if rule.name not in visiting:
                visiting.add(rule.name)
                for alternative in rule.patterns:
                    keys |= self._pattern_first(alternative, visiting)
                visiting.discard(rule.name)
            if not self.nullable(rule):
                return keys
        return keys

    def nullable(self, rule: Rule | str) -> bool:
        """True if the rule can match without consuming a token."""
        rule = self._resolve(rule)
        self._sync_caches()
        cached = self._nullable_cache.get(rule.name)
        if cached is None:
            cached = self._rule_nullable(rule, set())
            self._nullable_cache[rule.name] = cached
        return cached

    def _rule_nullable(self, rule: Rule, visiting: set[str]) -> bool:
        if rule.optional:
            return True
        if rule.name in visiting:
            return False
        visiting.add(rule.name)
        try:
            return any(
                all(
                    isinstance(token, Nonterminal)
                    and self._rule_nullable(self[token.rule_name], visiting)
                    for token in pattern.tokens
                )
                for pattern in rule.patterns
            )
        finally:
            visiting.discard(rule.name)

    def check_first_sets(self) -> None:
        """
        Verify that the alternatives of every rule have disjoint first sets.

        Raises:
            AmbiguousGrammarError: naming the rule and the clashing patterns
        """
        for rule in self._rules.values():
            for left, right in combinations(rule.patterns, 2):
                clash = _overlap(self.first_set(left), self.first_set(right))
                if clash:
                    raise AmbiguousGrammarError(
                        f"Rule '{rule.name}': patterns '{left}' and '{right}' "
                        f"can both start with {', '.join(sorted(clash))}",
                        "ambiguous_rule",
                    )


def describe_first_key(key: FirstKey) -> str:
    kind, value = key
    if kind == "lit":
        return f"'{value}'"
    return value.value


def _overlap(left: frozenset[FirstKey], right: frozenset[FirstKey]) -> set[str]:
    clash = {describe_first_key(key) for key in left & right}
    # A word literal is scanned as an ID token, so it clashes with $ID.
    id_key = ("kind", TokenKind.ID)
    for keys, other in ((left, right), (right, left)):
        if id_key in other:
            clash |= {
                describe_first_key(key)
                for key in keys
                if key[0] == "lit" and _is_word(key[1])
            }
    return clash
