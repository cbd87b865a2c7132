"""
Keyword documentation model and cross-referencer.

Every pattern that carries a keyword becomes one :class:`KeywordDocumentation`
entry. The entries are created from a finished registry and then linked by
:meth:`SyntaxReference.cross_reference`:

1. ``^keyword`` argument descriptions add the referenced keyword as an
   attribute of the referencing one.
2. Patterns found inside the brace blocks of a keyword become its optional
   attributes; the keyword becomes a context of each of them.
3. See-also names are resolved and sorted.

Contexts are not stored on the entries. They are looked up in an index
(keyword -> owner keywords) that the cross-referencer rebuilds on every run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..errors import DuplicateKeywordError, UnknownReferenceError
from ..grammar import ArgumentDoc, ListKind, Literal, Nonterminal, Pattern, Registry, Rule, Terminal

logger = logging.getLogger(__name__)

# Patterns starting with this rule apply to an explicitly named scenario.
SCENARIO_PREFIX_RULE = "scenarioId"


class KeywordDocumentation:
    """
    Documentation of one keyword.

    Attributes:
        keyword: Documented keyword, e.g. ``task`` or ``booking:overtime``
        pattern: The pattern the keyword belongs to
        syntax: Syntax line, e.g. ``task <id> <name> [{ <attributes> }]``
        args: Argument documentation in syntax order, without duplicates
        rule: Rule owning the pattern
        optional_attributes: Keywords accepted inside this keyword's blocks
        see_also: Related keywords, sorted
        scenario_specific: The keyword is used in a scenario specific context
    """

    def __init__(
        self,
        pattern: Pattern,
        syntax: str,
        args: list[ArgumentDoc],
        rule: Rule | None = None,
        owner_index: dict[str, list[KeywordDocumentation]] | None = None,
    ):
        if pattern.keyword is None:
            raise ValueError(f"Pattern '{pattern}' has no keyword")
        self.keyword: str = pattern.keyword
        self.pattern = pattern
        self.syntax = syntax
        self.args = list(dict.fromkeys(args))
        self.rule = rule
        self.optional_attributes: list[KeywordDocumentation] = []
        self.see_also: list[KeywordDocumentation] = []
        self.scenario_specific = False
        self._owner_index = owner_index if owner_index is not None else {}

    @property
    def contexts(self) -> list[KeywordDocumentation]:
        """Keywords that accept this keyword as an attribute."""
        return list(self._owner_index.get(self.keyword, []))

    @property
    def inheritable(self) -> bool:
        return self.pattern.inheritable

    @property
    def doc(self) -> str:
        return self.pattern.doc or ""

    def __repr__(self) -> str:
        return f"KeywordDocumentation({self.keyword})"


class SyntaxReference:
    """
    All keyword documentation entries of a registry.

    Args:
        registry: A complete grammar, including any extensions

    Raises:
        DuplicateKeywordError: two patterns document the same keyword
    """

    def __init__(self, registry: Registry):
        self.registry = registry
        self._entries: dict[str, KeywordDocumentation] = {}
        self._owners: dict[str, list[KeywordDocumentation]] = {}
        self._attribute_patterns: dict[str, dict[Pattern, bool]] = {}

        for rule in sorted(registry, key=lambda r: r.name):
            for pattern in rule.patterns:
                if pattern.keyword is None:
                    continue
                if pattern.keyword in self._entries:
                    raise DuplicateKeywordError(
                        f"Keyword '{pattern.keyword}' is documented by "
                        f"'{self._entries[pattern.keyword].pattern}' and '{pattern}'",
                        "duplicate_keyword",
                    )
                args: list[ArgumentDoc] = []
                syntax = self.to_syntax(pattern, args)
                self._entries[pattern.keyword] = KeywordDocumentation(
                    pattern, syntax, args, rule, self._owners
                )
                self._attribute_patterns[pattern.keyword] = self._optional_attribute_patterns(
                    pattern
                )
        logger.debug("Collected %d documented keywords", len(self._entries))

    def __getitem__(self, keyword: str) -> KeywordDocumentation:
        return self._entries[keyword]

    def __contains__(self, keyword: object) -> bool:
        return keyword in self._entries

    def __iter__(self) -> Iterator[KeywordDocumentation]:
        for keyword in self.keywords():
            yield self._entries[keyword]

    def __len__(self) -> int:
        return len(self._entries)

    def keywords(self) -> list[str]:
        return sorted(self._entries)

    # ------------------------------------------------------------------
    # Cross referencing
    # ------------------------------------------------------------------

    def cross_reference(self) -> None:
        """
        Link the entries to each other.

        The link tables are rebuilt from scratch, so calling this again
        yields the same links.

        Raises:
            UnknownReferenceError: an argument or see-also reference names an
                undocumented keyword
        """
        self._owners.clear()
        for entry in self._entries.values():
            entry.optional_attributes = []
            entry.see_also = []
            entry.scenario_specific = False

        for keyword in self.keywords():
            entry = self._entries[keyword]
            attributes = dict(self._attribute_patterns[keyword])

            for arg in entry.args:
                target = arg.reference
                if target is None:
                    continue
                if target not in self._entries:
                    raise UnknownReferenceError(
                        f"Argument '{arg.name}' of '{keyword}' refers to unknown keyword "
                        f"'{target}'",
                        "unknown_reference",
                    )
                attributes[self._entries[target].pattern] = False

            for pattern, scenario_specific in attributes.items():
                if pattern.keyword is None:
                    logger.warning(
                        "Keyword '%s' accepts pattern '%s' which has no keyword", keyword, pattern
                    )
                    continue
                child = self._entries.get(pattern.keyword)
                if child is None:
                    logger.warning(
                        "Keyword '%s' has undocumented optional attribute '%s'",
                        keyword,
                        pattern.keyword,
                    )
                    continue
                if child not in entry.optional_attributes:
                    entry.optional_attributes.append(child)
                owners = self._owners.setdefault(child.keyword, [])
                if entry not in owners:
                    owners.append(entry)
                if scenario_specific:
                    child.scenario_specific = True

            for also in sorted(entry.pattern.see_also):
                if also not in self._entries:
                    raise UnknownReferenceError(
                        f"See also reference '{also}' of '{keyword}' is unknown",
                        "unknown_reference",
                    )
                entry.see_also.append(self._entries[also])

        for entry in self._entries.values():
            entry.optional_attributes.sort(key=lambda e: e.keyword)

    # ------------------------------------------------------------------
    # Optional attributes
    # ------------------------------------------------------------------

    def _optional_attribute_patterns(self, pattern: Pattern) -> dict[Pattern, bool]:
        """Patterns usable inside the brace blocks of ``pattern``."""
        found: dict[Pattern, bool] = {}
        self._walk_pattern(pattern, found, set(), set())
        return found

    def _walk_pattern(
        self,
        pattern: Pattern,
        found: dict[Pattern, bool],
        seen_rules: set[str],
        seen_bodies: set[tuple[str, bool]],
    ) -> None:
        for token in pattern.tokens:
            if not isinstance(token, Nonterminal) or token.rule_name in seen_rules:
                continue
            seen_rules.add(token.rule_name)
            rule = self.registry[token.rule_name]
            if rule.options_body is not None:
                self._walk_body(rule.options_body, False, found, seen_bodies)
            elif len(rule.patterns) == 1 and rule.patterns[0].keyword is None:
                # Headers and list rules are part of the keyword's own syntax.
                self._walk_pattern(rule.patterns[0], found, seen_rules, seen_bodies)

    def _walk_body(
        self,
        rule_name: str,
        scenario_specific: bool,
        found: dict[Pattern, bool],
        seen_bodies: set[tuple[str, bool]],
    ) -> None:
        if (rule_name, scenario_specific) in seen_bodies:
            return
        seen_bodies.add((rule_name, scenario_specific))

        for pattern in self.registry[rule_name].patterns:
            if pattern.keyword is not None:
                found[pattern] = found.get(pattern, False) or scenario_specific
                continue
            if not all(isinstance(token, Nonterminal) for token in pattern.tokens):
                # Undocumented attribute; reported by the cross-referencer.
                found.setdefault(pattern, scenario_specific)
                continue
            prefixed = pattern.tokens[0] == Nonterminal(SCENARIO_PREFIX_RULE)
            for token in pattern.tokens:
                if token.rule_name != SCENARIO_PREFIX_RULE:
                    self._walk_body(
                        token.rule_name, scenario_specific or prefixed, found, seen_bodies
                    )

    # ------------------------------------------------------------------
    # Syntax lines
    # ------------------------------------------------------------------

    def to_syntax(self, pattern: Pattern, args: list[ArgumentDoc], depth: int = 0) -> str:
        """
        Render the syntax line of ``pattern``.

        Single-pattern helper rules are inlined, brace blocks are shown as
        ``[{ <attributes> }]``. The argument documentation of ``pattern`` and
        of all inlined patterns is appended to ``args``.
        """
        parts = []
        for index, token in enumerate(pattern.tokens):
            arg = pattern.args.get(index)
            if arg is not None:
                args.append(arg)
                if isinstance(token, Literal):
                    parts.append(token.text)
                else:
                    parts.append(f"<{arg.name}>")
            elif isinstance(token, Literal):
                parts.append(token.text)
            elif isinstance(token, Terminal):
                parts.append(f"<{token.kind.value.lower()}>")
            else:
                parts.append(self._nonterminal_syntax(token, args, depth))
        return " ".join(part for part in parts if part)

    def _nonterminal_syntax(self, token: Nonterminal, args: list[ArgumentDoc], depth: int) -> str:
        rule = self.registry[token.rule_name]
        if rule.options_body is not None:
            return "[{ <attributes> }]"
        if rule.list_element is not None:
            element = self._element_syntax(rule, args, depth)
            separator = "," if rule.list_kind == ListKind.COMMA else ""
            return f"{element}[{separator} {element}...]"
        if depth < 8 and len(rule.patterns) == 1 and rule.patterns[0].keyword is None:
            inner = self.to_syntax(rule.patterns[0], args, depth + 1)
            return f"[{inner}]" if rule.optional else inner
        if rule.optional:
            return f"[<{rule.name}>]"
        return f"<{rule.name}>"

    def _element_syntax(self, rule: Rule, args: list[ArgumentDoc], depth: int) -> str:
        element = rule.list_element
        if isinstance(element, Literal):
            return element.text
        if isinstance(element, Terminal):
            return f"<{element.kind.value.lower()}>"
        return self._nonterminal_syntax(element, args, depth + 1)


def build_reference(registry: Registry) -> SyntaxReference:
    """Create and cross-reference the documentation of ``registry``."""
    reference = SyntaxReference(registry)
    reference.cross_reference()
    return reference
