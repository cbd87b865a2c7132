"""
Token model shared by the scanner and the grammar.

The scanner produces :class:`Token` objects; grammar patterns refer to token
kinds through :class:`TokenKind`. Keywords are not separate kinds: the
scanner reports them as ``ID`` tokens and the grammar matches them by text.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


class TokenKind(Enum):
    """Terminal token kinds of the TJP language."""

    ID = "ID"
    ID_WITH_COLON = "ID_WITH_COLON"
    ABSOLUTE_ID = "ABSOLUTE_ID"
    RELATIVE_ID = "RELATIVE_ID"
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    DATE = "DATE"
    TIME = "TIME"
    MACRO = "MACRO"

    # Punctuation such as '{', ',', '>=' (matched by text)
    LITERAL = "LITERAL"
    EOF = "EOF"


# Kinds whose text can match a literal keyword of the grammar.
LITERAL_KINDS = frozenset({TokenKind.ID, TokenKind.LITERAL})


class SourceLocation(BaseModel):
    """Source position of a token.

    Attributes:
        file: Path of the source file (or ``<macro name>`` for expansions)
        line: 1-indexed line number
        column: 1-indexed column number
    """

    file: str
    line: int
    column: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """
    A single token read from a TJP source.

    Attributes:
        kind: Kind of token
        value: Text of the token (strings without quotes, macros without brackets)
        location: Where the token starts
    """

    kind: TokenKind
    value: str
    location: SourceLocation

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.value!r}, {self.location})"

    def describe(self) -> str:
        """Human readable form used in error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind in LITERAL_KINDS:
            return f"'{self.value}'"
        return f"{self.kind.value} '{self.value}'"
