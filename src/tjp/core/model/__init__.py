"""
Domain model built by the TJP grammar's semantic actions.
"""

from .expressions import (
    OPERATORS,
    LogicalAttribute,
    LogicalExpression,
    LogicalFlag,
    LogicalOperation,
)
from .project import Project
from .property import AttributeDefinition, Property, PropertySet, Resource, Scenario, Task
from .report import ColumnDefinition, Report, ReportElement, ReportType
from .values import (
    Allocation,
    Booking,
    Interval,
    Macro,
    RealFormat,
    Reference,
    SortCriterion,
    TaskDependency,
    WorkingHours,
)

__all__ = [
    "OPERATORS",
    "Allocation",
    "AttributeDefinition",
    "Booking",
    "ColumnDefinition",
    "Interval",
    "LogicalAttribute",
    "LogicalExpression",
    "LogicalFlag",
    "LogicalOperation",
    "Macro",
    "Project",
    "Property",
    "PropertySet",
    "RealFormat",
    "Reference",
    "Report",
    "ReportElement",
    "ReportType",
    "Resource",
    "Scenario",
    "SortCriterion",
    "Task",
    "TaskDependency",
    "WorkingHours",
]
