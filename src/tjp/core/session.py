"""
Parse sessions.

A session owns one grammar registry and one parse context. Because
``extend`` statements modify the registry in place, every session builds its
own registry and a session is never shared between documents that must not
see each other's extensions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from .config import TjpConfig
from .context import ParseContext
from .docs import SyntaxReference, build_reference
from .engine import Parser, TokenStream
from .errors import ParseError, SemanticError, make_parse_error
from .model import Project
from .rules import START_RULE, build_grammar
from .scanner import Scanner

logger = logging.getLogger(__name__)


class ParseSession:
    """
    Parse TJP documents with a private grammar.

    Usage::

        with ParseSession(config) as session:
            project = session.parse_file(Path("plan.tjp"))
            reference = session.syntax_reference()

    Args:
        config: Session configuration; defaults apply when omitted
    """

    def __init__(self, config: TjpConfig | None = None):
        self.config = config if config is not None else TjpConfig()
        self.registry = build_grammar()
        self.context = ParseContext(registry=self.registry, config=self.config)

    def __enter__(self) -> ParseSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self.context.scanner is not None:
            self.context.scanner.close()
            self.context.scanner = None

    def parse_text(self, text: str, file: Path | str = "<string>") -> Project:
        """
        Parse a complete document.

        Raises:
            ParseError: the text does not match the grammar
            SemanticError: a semantic action rejected the input
        """
        self.close()
        self.context.reset()
        scanner = Scanner(text, file, self.config.parser.include_paths)
        self.context.scanner = scanner
        parser = Parser(self.registry, TokenStream(scanner), self.context)
        logger.debug("Parsing %s", file)
        project = parser.parse(START_RULE)
        if not isinstance(project, Project):
            raise ParseError(f"{file} contains no project declaration", "no_project")
        return project

    def parse_file(self, path: Path) -> Project:
        """Parse the document stored at ``path``; an unreadable file is a ParseError."""
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise make_parse_error(
                f"Cannot read {path}: {e.strerror or e}", "file_not_found", str(path), 1, 1
            ) from None
        return self.parse_text(text, path)

    def syntax_reference(self) -> SyntaxReference:
        """Cross-referenced documentation of the grammar, extensions included."""
        return build_reference(self.registry)


@dataclass
class ParseResult:
    """Outcome of parsing one file of a batch."""

    path: Path
    project: Project | None = None
    error: ParseError | SemanticError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_files(paths: list[Path], config: TjpConfig | None = None) -> list[ParseResult]:
    """
    Parse several documents, one session each.

    Syntax and semantic errors are collected per document; the remaining
    documents are still parsed.
    """
    results = []
    for path in paths:
        with ParseSession(config) as session:
            try:
                results.append(ParseResult(path, project=session.parse_file(path)))
            except (ParseError, SemanticError) as e:
                logger.debug("Failed to parse %s: %s", path, e)
                results.append(ParseResult(path, error=e))
    return results
