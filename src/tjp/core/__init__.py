"""
Core of the TJP toolchain.

- grammar: rules, patterns, the registry and the grammar builder
- scanner / engine: tokens and recursive-descent matching
- rules: the TJP grammar
- extension: ``extend`` statements that add attributes at parse time
- docs: keyword reference generated from the grammar
- session: parse sessions and batch parsing
"""

from .config import TjpConfig, load_config
from .errors import ErrorContext, TjpError
from .session import ParseResult, ParseSession, parse_files

__all__ = [
    "ErrorContext",
    "ParseResult",
    "ParseSession",
    "TjpConfig",
    "TjpError",
    "load_config",
    "parse_files",
]
