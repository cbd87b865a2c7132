"""
Error types for TJP grammar definition, parsing, and documentation.

Every error carries a stable string ``code`` that tooling and tests can
match on, a free-text message, and optionally the source position and the
property that was being parsed when the error occurred.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any


class TjpError(Exception):
    """Base exception for all TJP errors."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        context: "ErrorContext | None" = None,
        property: Any = None,
    ):
        self.message = message
        self.code = code
        self.context = context
        self.property = property
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with code, location and property if available."""
        text = f"[{self.code}] {self.message}"
        if self.property is not None:
            text += f" (in {self.property})"
        if self.context:
            return f"{self.context.format()}: {text}"
        return text


class GrammarDefinitionError(TjpError):
    """
    Raised when the grammar itself is defective.

    Examples:
    - Duplicate rule names
    - Duplicate documented keywords
    - Alternatives of one rule sharing a first token
    """

    pass


class DuplicateRuleError(GrammarDefinitionError):
    """A rule with the same name is already registered."""

    pass


class DuplicateKeywordError(GrammarDefinitionError):
    """Two documented patterns claim the same keyword."""

    pass


class AmbiguousGrammarError(GrammarDefinitionError):
    """Two alternatives of one rule can start with the same token."""

    pass


class ParseError(TjpError):
    """
    Raised when the token stream does not match the grammar.

    Examples:
    - Lookahead matches no alternative of a non-optional rule
    - Malformed date or number literal
    - Unterminated string or macro
    """

    pass


class SemanticError(TjpError):
    """
    Raised when a semantic action rejects well-formed input.

    Examples:
    - Values out of range (priority, complete, overtime)
    - Unknown selection or scheduling mode
    - Unresolved task, resource or scenario reference
    - Duplicate attribute extension
    """

    pass


class InvalidAttributeNameError(SemanticError):
    """User defined attribute IDs must start with a capital letter."""

    pass


class DuplicateAttributeError(SemanticError):
    """An extension redefines an attribute that already exists."""

    pass


class DocumentationIntegrityError(TjpError):
    """Raised when the keyword documentation cannot be cross-referenced."""

    pass


class UnknownReferenceError(DocumentationIntegrityError):
    """A see-also or argument reference names an undocumented keyword."""

    pass


@dataclass
class ErrorContext:
    """
    Source position of an error.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    file: Path | str
    line: int
    column: int

    def format(self) -> str:
        """Format as ``file:line:column``."""
        return f"{self.file}:{self.line}:{self.column}"


def make_parse_error(
    message: str,
    code: str,
    file: Path | str,
    line: int,
    column: int,
    property: Any = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        code: Stable error code
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        property: Property being parsed, if any

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return ParseError(message, code, context, property)
