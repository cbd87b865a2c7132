"""
Grammar model for the TJP language.

- Registry: named rules and the combinators that build them
- Rule / Pattern: alternatives with semantic actions and documentation
- GrammarBuilder: declaration idiom used by the grammar mixins
"""

from .builder import GrammarBuilder, clean_text
from .coerce import coerce
from .pattern import (
    Action,
    ArgumentDoc,
    Literal,
    Nonterminal,
    Pattern,
    Terminal,
    TokenSpec,
    parse_token_spec,
)
from .registry import Registry
from .rule import ListKind, Rule

__all__ = [
    "Action",
    "ArgumentDoc",
    "GrammarBuilder",
    "ListKind",
    "Literal",
    "Nonterminal",
    "Pattern",
    "Registry",
    "Rule",
    "Terminal",
    "TokenSpec",
    "clean_text",
    "coerce",
    "parse_token_spec",
]
