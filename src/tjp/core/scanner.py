"""
Scanner for the TJP language.

Converts source text into a stream of tokens with source location tracking.
Tokens are produced on demand so that semantic actions can change the input
while the parser runs: ``include`` pushes another file onto the input stack
and ``${name}`` pushes the body of a macro. A pushed source is popped when it
is exhausted and scanning resumes in the source below it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import make_parse_error
from .model.values import Macro
from .tokens import SourceLocation, Token, TokenKind

logger = logging.getLogger(__name__)

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"

# Order matters: longer and more specific forms first.
_TOKEN_RES: list[tuple[TokenKind, re.Pattern[str]]] = [
    (
        TokenKind.DATE,
        re.compile(
            r"\d{4}-\d{1,2}-\d{1,2}(?:-\d{1,2}:\d{1,2}(?::\d{1,2})?)?(?:-[+-]\d{4})?(?![\w.])"
        ),
    ),
    (TokenKind.TIME, re.compile(r"\d{1,2}:\d{2}(?!\d)")),
    (TokenKind.FLOAT, re.compile(r"(?:\d+\.\d+|\.\d+)")),
    (TokenKind.INTEGER, re.compile(r"\d+")),
    (TokenKind.RELATIVE_ID, re.compile(rf"!+{_NAME}(?:\.{_NAME})*")),
    (TokenKind.ABSOLUTE_ID, re.compile(rf"{_NAME}(?:\.{_NAME})+")),
    (TokenKind.ID_WITH_COLON, re.compile(rf"{_NAME}:")),
    (TokenKind.ID, re.compile(_NAME)),
]

_TWO_CHAR_LITERALS = (">=", "<=", "!=")
_ONE_CHAR_LITERALS = "{}(),-+~|&><="
_MACRO_CALL_RE = re.compile(rf"\$\{{\s*({_NAME})\s*\}}")


@dataclass
class _Source:
    """One entry of the input stack."""

    text: str
    file: str
    pos: int = 0
    line: int = 1
    column: int = 1
    macro: str | None = None  # name of the expanded macro, None for files

    def current_char(self) -> str | None:
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters, updating line/column."""
        chunk = self.text[self.pos : self.pos + count]
        for ch in chunk:
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.pos += len(chunk)
        return chunk

    def location(self) -> SourceLocation:
        return SourceLocation(file=self.file, line=self.line, column=self.column)


class Scanner:
    """
    Token source for the TJP parser.

    Args:
        text: Source text to tokenize
        file: Source file path (for error reporting and relative includes)
        include_paths: Extra directories searched by ``include``
    """

    def __init__(self, text: str, file: Path | str, include_paths: list[Path] | None = None):
        self._sources: list[_Source] = [_Source(text, str(file))]
        self.include_paths = list(include_paths or [])
        self.macros: dict[str, Macro] = {}

    # ------------------------------------------------------------------
    # Input stack
    # ------------------------------------------------------------------

    def _current(self) -> _Source:
        if not self._sources:
            raise make_parse_error("Scanner has been closed", "scanner_closed", "<closed>", 0, 0)
        return self._sources[-1]

    def include(self, name: str) -> Path:
        """Push the named file onto the input stack."""
        current = self._current()
        candidates = [Path(current.file).parent / name]
        candidates += [directory / name for directory in self.include_paths]
        for path in candidates:
            if path.is_file():
                self._check_include_cycle(path, current)
                logger.debug("Including %s", path)
                self._sources.append(_Source(path.read_text(encoding="utf-8"), str(path)))
                return path
        raise make_parse_error(
            f"Cannot find include file '{name}'",
            "include_not_found",
            current.file,
            current.line,
            current.column,
        )

    def _check_include_cycle(self, path: Path, current: _Source) -> None:
        resolved = path.resolve()
        for source in self._sources:
            if source.macro is None and Path(source.file).resolve() == resolved:
                raise make_parse_error(
                    f"File '{path}' includes itself",
                    "include_recursion",
                    current.file,
                    current.line,
                    current.column,
                )

    def add_macro(self, macro: Macro) -> None:
        self.macros[macro.name] = macro

    def close(self) -> None:
        self._sources.clear()

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _skip_space_and_comments(self, src: _Source) -> None:
        while True:
            ch = src.current_char()
            if ch is None:
                return
            if ch in " \t\r\n":
                src.advance()
            elif ch == "#" or (ch == "/" and src.peek_char() == "/"):
                while src.current_char() not in (None, "\n"):
                    src.advance()
            elif ch == "/" and src.peek_char() == "*":
                start = src.location()
                end = src.text.find("*/", src.pos + 2)
                if end < 0:
                    raise make_parse_error(
                        "Unterminated comment", "unterminated_comment",
                        start.file, start.line, start.column,
                    )
                src.advance(end + 2 - src.pos)
            else:
                return

    def next_token(self) -> Token:
        """Return the next token, popping exhausted sources and expanding macros."""
        while True:
            src = self._current()
            self._skip_space_and_comments(src)
            if src.current_char() is None:
                if len(self._sources) == 1:
                    return Token(TokenKind.EOF, "", src.location())
                self._sources.pop()
                logger.debug("Finished %s, resuming %s", src.file, self._sources[-1].file)
                continue
            location = src.location()
            if src.current_char() == "$" and src.peek_char() == "{":
                self._expand_macro(src, location)
                continue
            break

        ch = src.current_char()
        if ch in ('"', "'"):
            return Token(TokenKind.STRING, self._read_string(src, location), location)

        if ch == "[":
            return Token(TokenKind.MACRO, self._read_macro_body(src, location), location)

        for kind, regex in _TOKEN_RES:
            match = regex.match(src.text, src.pos)
            if match:
                value = src.advance(match.end() - match.start())
                if kind == TokenKind.ID_WITH_COLON:
                    value = value[:-1]
                return Token(kind, value, location)

        two = src.text[src.pos : src.pos + 2]
        if two in _TWO_CHAR_LITERALS:
            return Token(TokenKind.LITERAL, src.advance(2), location)
        if ch in _ONE_CHAR_LITERALS:
            return Token(TokenKind.LITERAL, src.advance(), location)

        raise make_parse_error(
            f"Unexpected character: {ch!r}",
            "unexpected_char",
            location.file,
            location.line,
            location.column,
        )

    def tokenize(self) -> list[Token]:
        """Scan the complete input, including the EOF token."""
        tokens = [self.next_token()]
        while tokens[-1].kind != TokenKind.EOF:
            tokens.append(self.next_token())
        return tokens

    def _read_string(self, src: _Source, location: SourceLocation) -> str:
        quote = src.advance()
        chars = []
        while True:
            current = src.current_char()
            if current is None:
                raise make_parse_error(
                    "Unterminated string literal",
                    "unterminated_string",
                    location.file,
                    location.line,
                    location.column,
                )
            if current == quote:
                src.advance()
                return "".join(chars)
            if current == "\\" and src.peek_char() in (quote, "\\"):
                src.advance()
            chars.append(src.advance())

    def _read_macro_body(self, src: _Source, location: SourceLocation) -> str:
        src.advance()
        depth = 1
        chars = []
        while True:
            current = src.current_char()
            if current is None:
                raise make_parse_error(
                    "Unterminated macro body",
                    "unterminated_macro",
                    location.file,
                    location.line,
                    location.column,
                )
            if current == "[":
                depth += 1
            elif current == "]":
                depth -= 1
                if depth == 0:
                    src.advance()
                    return "".join(chars)
            chars.append(src.advance())

    def _expand_macro(self, src: _Source, location: SourceLocation) -> None:
        match = _MACRO_CALL_RE.match(src.text, src.pos)
        if match is None:
            raise make_parse_error(
                "Malformed macro call", "bad_macro_call",
                location.file, location.line, location.column,
            )
        name = match.group(1)
        macro = self.macros.get(name)
        if macro is None:
            raise make_parse_error(
                f"Undefined macro '{name}'", "undefined_macro",
                location.file, location.line, location.column,
            )
        if any(source.macro == name for source in self._sources):
            raise make_parse_error(
                f"Macro '{name}' expands itself", "macro_recursion",
                location.file, location.line, location.column,
            )
        src.advance(match.end() - match.start())
        self._sources.append(
            _Source(
                macro.value, location.file, line=location.line, column=location.column, macro=name
            )
        )
