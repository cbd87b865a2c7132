"""
Reference documentation generated from the grammar.

- SyntaxReference: keyword entries built from a registry and cross-referenced
- render: fixed width text of one keyword entry
"""

from .keyword_doc import KeywordDocumentation, SyntaxReference, build_reference
from .renderer import render, render_manual, wrap

__all__ = [
    "KeywordDocumentation",
    "SyntaxReference",
    "build_reference",
    "render",
    "render_manual",
    "wrap",
]
