"""
Report definitions.

Only the definition side is modelled: which columns, time frame, filters
and sorting a report uses. Rendering reports is not part of this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from .expressions import LogicalExpression
from .values import SortCriterion

if TYPE_CHECKING:
    from .project import Project
    from .property import Task


class ReportType(Enum):
    EXPORT = "export"
    HTML_TASK_REPORT = "htmltaskreport"
    HTML_RESOURCE_REPORT = "htmlresourcereport"


DEFAULT_COLUMN_TITLES = {
    "complete": "Completion",
    "daily": "",
    "duration": "Duration",
    "effort": "Effort",
    "end": "End",
    "flags": "Flags",
    "hierarchindex": "WBS",
    "id": "Id",
    "index": "Index",
    "maxend": "Max. End",
    "maxstart": "Max. Start",
    "minend": "Min. End",
    "minstart": "Min. Start",
    "monthly": "",
    "name": "Name",
    "no": "No.",
    "note": "Note",
    "priority": "Priority",
    "resources": "Resources",
    "responsible": "Responsible",
    "start": "Start",
    "weekly": "",
}


class ColumnDefinition(BaseModel):
    """A report column and its header title."""

    id: str
    title: str


@dataclass
class ReportElement:
    """The table of a report."""

    project: Project
    columns: list[ColumnDefinition] = field(default_factory=list)
    start: datetime | None = None
    end: datetime | None = None
    headline: str | None = None
    hide_task: LogicalExpression | None = None
    hide_resource: LogicalExpression | None = None
    rollup_task: LogicalExpression | None = None
    scenarios: list[int] = field(default_factory=lambda: [0])
    sort_tasks: list[SortCriterion] = field(default_factory=list)
    sort_resources: list[SortCriterion] = field(default_factory=list)
    task_root: Task | None = None
    timeformat: str | None = None

    def __post_init__(self) -> None:
        self.start = self.start or self.project["start"]
        self.end = self.end or self.project["end"]

    def default_column_title(self, column_id: str) -> str | None:
        """Header of a column, or None if no such column exists."""
        if column_id in DEFAULT_COLUMN_TITLES:
            return DEFAULT_COLUMN_TITLES[column_id]
        for property_set in (self.project.tasks, self.project.resources):
            definition = property_set.definitions.get(column_id)
            if definition is not None and definition.user_defined:
                return definition.name
        return None


@dataclass
class Report:
    """A report definition of one of the :class:`ReportType` kinds."""

    project: Project
    type: ReportType
    file_name: str
    element: ReportElement = field(init=False)

    def __post_init__(self) -> None:
        self.element = ReportElement(self.project)
        self.project.reports.append(self)

    def summary(self) -> dict[str, Any]:
        element = self.element
        return {
            "type": self.type.value,
            "file": self.file_name,
            "columns": [column.id for column in element.columns],
            "start": element.start,
            "end": element.end,
        }
