"""
Ambient state of one parse.

Semantic actions receive the positional values of their pattern and this
context. Actions communicate through it: a header action sets the current
property that later attribute actions modify, a scenario prefix sets the
scenario index used by the attributes that follow it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NoReturn

from .errors import ErrorContext, SemanticError
from .tokens import SourceLocation

if TYPE_CHECKING:
    from .config import TjpConfig
    from .extension import GrammarExtender
    from .grammar import Registry
    from .model import Booking, ColumnDefinition, Project, Property, Report, ReportElement
    from .model import TaskDependency
    from .scanner import Scanner

_CURRENT = object()


@dataclass
class ParseContext:
    """
    Attributes:
        registry: Grammar the document is parsed with
        config: Session configuration
        extender: Applies ``extend`` statements to the registry
        scanner: Token source; actions push includes and add macros
        project: Project created by the project header
        property: Property whose block is being parsed
        scenario_idx: Scenario the next scenario specific attribute applies to
        location: Position of the first token of the pattern being reduced
    """

    registry: Registry
    config: TjpConfig | None = None
    extender: GrammarExtender | None = None
    scanner: Scanner | None = None
    project: Project | None = None
    property: Property | None = None
    scenario_idx: int = 0
    location: SourceLocation | None = None

    booking: Booking | None = None
    task_dependency: TaskDependency | None = None
    report: Report | None = None
    report_element: ReportElement | None = None
    column: ColumnDefinition | None = None
    extend_target: str | None = None
    extensions: list[str] = field(default_factory=list)

    def error(self, code: str, message: str, property: Any = _CURRENT) -> NoReturn:
        """Reject the current pattern with a :class:`SemanticError`."""
        raise SemanticError(
            message,
            code,
            self.error_context(),
            self.property if property is _CURRENT else property,
        )

    def error_context(self) -> ErrorContext | None:
        if self.location is None:
            return None
        return ErrorContext(self.location.file, self.location.line, self.location.column)

    def require_project(self) -> Project:
        if self.project is None:
            self.error("no_project", "A project header is required before this statement")
        return self.project

    def require_property(self) -> Property:
        if self.property is None:
            self.error("no_property", "This attribute is only allowed inside a property")
        return self.property

    def reset(self) -> None:
        """Forget the per-document state, keeping registry and configuration."""
        self.scanner = None
        self.project = None
        self.property = None
        self.scenario_idx = 0
        self.location = None
        self.booking = None
        self.task_dependency = None
        self.report = None
        self.report_element = None
        self.column = None
        self.extend_target = None
