"""
tjp - grammar engine and self-documenting parser for TJP project descriptions.

The grammar is declared with a small rule/pattern builder, matched by a
recursive-descent engine that runs semantic actions against a project model,
and can be extended at parse time by the document itself. The same grammar
metadata produces the keyword reference manual.
"""

from ._version import get_version
from .core.errors import (
    DocumentationIntegrityError,
    GrammarDefinitionError,
    ParseError,
    SemanticError,
    TjpError,
)
from .core.session import ParseSession, parse_files

__version__ = get_version()

__all__ = [
    "__version__",
    "DocumentationIntegrityError",
    "GrammarDefinitionError",
    "ParseError",
    "ParseSession",
    "SemanticError",
    "TjpError",
    "parse_files",
]
