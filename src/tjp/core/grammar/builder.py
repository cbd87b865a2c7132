"""
Declarative grammar builder.

Grammar modules are mixins on top of :class:`GrammarBuilder`. Every method
whose name starts with ``rule_`` declares one rule using the builder idiom::

    def rule_taskHeader(self) -> None:
        self.new_rule("taskHeader")
        self.new_pattern(["_task", "$ID", "$STRING"], create_task)
        self.arg(1, "id", "The ID of the task")

``new_rule`` and ``new_pattern`` set the *current* rule and pattern; ``doc``,
``arg``, ``also`` and ``inheritable`` annotate the current pattern.
"""

from __future__ import annotations

import logging
import re
import textwrap
from collections.abc import Iterable, Sequence

from ..errors import GrammarDefinitionError
from .pattern import Action, ArgumentDoc, Nonterminal, Pattern, Terminal, TokenSpec
from .registry import Registry
from .rule import Rule

logger = logging.getLogger(__name__)


_SOFT_BREAK_RE = re.compile(r"(?<=\S)[ \t]*\n(?=\S)")


def clean_text(text: str) -> str:
    """
    Normalize a documentation string written as an indented block.

    Lines of one paragraph are joined into a single line so the renderer can
    wrap them. Blank lines separate paragraphs and lines indented relative
    to the block keep their line break.
    """
    return _SOFT_BREAK_RE.sub(" ", textwrap.dedent(text).strip())


class GrammarBuilder:
    """
    Base class for grammar definitions.

    This class provides the foundation for declaring rules, including the
    current rule/pattern bookkeeping and discovery of ``rule_*`` methods.
    """

    def __init__(self, registry: Registry | None = None):
        self.registry = registry if registry is not None else Registry()
        self._rule: Rule | None = None
        self._pattern: Pattern | None = None

    def build(self) -> Registry:
        """Invoke every ``rule_*`` method and return the populated registry."""
        methods = sorted(name for name in dir(self) if name.startswith("rule_"))
        for name in methods:
            getattr(self, name)()
        logger.debug("Built grammar with %d rules", len(self.registry))
        return self.registry

    # ------------------------------------------------------------------
    # Current rule and pattern
    # ------------------------------------------------------------------

    def _current_rule(self) -> Rule:
        if self._rule is None:
            raise GrammarDefinitionError("No rule has been started", "no_current_rule")
        return self._rule

    def _current_pattern(self) -> Pattern:
        if self._pattern is None:
            raise GrammarDefinitionError(
                f"Rule '{self._current_rule().name}' has no current pattern",
                "no_current_pattern",
            )
        return self._pattern

    def new_rule(self, name: str) -> Rule:
        self._rule = self.registry.define_rule(name)
        self._pattern = None
        return self._rule

    def optional(self) -> None:
        self.registry.mark_optional(self._current_rule())

    def repeatable(self) -> None:
        self.registry.mark_repeatable(self._current_rule())

    def new_pattern(self, tokens: Sequence[str | TokenSpec], action: Action | None = None) -> Pattern:
        self._pattern = self.registry.add_pattern(self._current_rule(), tokens, action)
        return self._pattern

    def single_pattern(self, token: str | TokenSpec) -> Pattern:
        self._pattern = self.registry.alias_single_pattern(self._current_rule(), token)
        return self._pattern

    def new_list_rule(self, name: str, element: str | TokenSpec) -> Rule:
        self._rule = self.registry.derive_list_rule(name, element)
        self._pattern = None
        return self._rule

    def new_comma_list_rule(self, name: str, element: str | TokenSpec) -> Rule:
        self._rule = self.registry.derive_comma_list_rule(name, element)
        self._pattern = None
        return self._rule

    def new_options_rule(self, name: str, body_rule_name: str) -> Rule:
        self._rule = self.registry.derive_options_rule(name, body_rule_name)
        self._pattern = None
        return self._rule

    # ------------------------------------------------------------------
    # Documentation
    # ------------------------------------------------------------------

    def doc(self, keyword: str, text: str) -> None:
        """Make the current pattern a documented keyword."""
        pattern = self._current_pattern()
        pattern.keyword = keyword
        pattern.doc = clean_text(text)

    def arg(self, index: int, name: str, text: str) -> None:
        """Document the token at position ``index`` of the current pattern."""
        pattern = self._current_pattern()
        if not 0 <= index < len(pattern.tokens):
            raise GrammarDefinitionError(
                f"Pattern '{pattern}' has no token {index}", "bad_arg_index"
            )
        text = clean_text(text)
        pattern.args[index] = ArgumentDoc(name, text, _type_spec(pattern.tokens[index], text))

    def also(self, keywords: Iterable[str]) -> None:
        self._current_pattern().see_also.update(keywords)

    def inheritable(self) -> None:
        self._current_pattern().inheritable = True


def _type_spec(token: TokenSpec, text: str) -> str:
    if isinstance(token, Terminal):
        return f"<{token.kind.value.lower()}>"
    if isinstance(token, Nonterminal) and not text.startswith("^"):
        return f"<{token.rule_name}>"
    return ""
