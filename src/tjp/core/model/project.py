"""
The project: root of the domain graph built by the parser.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..errors import SemanticError
from .property import AttributeDefinition, PropertySet, Resource, Scenario, Task
from .values import RealFormat, WorkingHours

logger = logging.getLogger(__name__)


def _scenario_attr(
    id: str, name: str, value_type: str, default: Any = None, **kwargs: Any
) -> AttributeDefinition:
    return AttributeDefinition(id, name, value_type, scenario_specific=True, default=default, **kwargs)


def task_attributes() -> list[AttributeDefinition]:
    return [
        AttributeDefinition("note", "Note", "text"),
        _scenario_attr("allocate", "Allocations", "list", []),
        _scenario_attr("complete", "Completion", "number"),
        _scenario_attr("depends", "Dependencies", "list", []),
        _scenario_attr("duration", "Duration", "duration", 0),
        _scenario_attr("effort", "Effort", "duration", 0),
        _scenario_attr("end", "End", "date"),
        _scenario_attr("flags", "Flags", "list", [], inheritable=True),
        _scenario_attr("forward", "Scheduling", "bool", True),
        _scenario_attr("length", "Length", "duration", 0),
        _scenario_attr("maxend", "Max. End", "date"),
        _scenario_attr("maxstart", "Max. Start", "date"),
        _scenario_attr("milestone", "Milestone", "bool", False),
        _scenario_attr("minend", "Min. End", "date"),
        _scenario_attr("minstart", "Min. Start", "date"),
        _scenario_attr("precedes", "Successors", "list", []),
        _scenario_attr("priority", "Priority", "integer", 500, inheritable=True),
        _scenario_attr("responsible", "Responsible", "list", []),
        _scenario_attr("scheduled", "Scheduled", "bool", False),
        _scenario_attr("start", "Start", "date"),
    ]


def resource_attributes() -> list[AttributeDefinition]:
    return [
        _scenario_attr("flags", "Flags", "list", [], inheritable=True),
        _scenario_attr("vacations", "Vacations", "list", [], inheritable=True),
        _scenario_attr("workinghours", "Working Hours", "workinghours", WorkingHours(),
                       inheritable=True),
    ]


def scenario_attributes() -> list[AttributeDefinition]:
    return [
        AttributeDefinition("enabled", "Enabled", "bool", inheritable=True, default=True),
        AttributeDefinition("projection", "Projection Mode", "bool", inheritable=True,
                            default=False),
        AttributeDefinition("strict", "Strict Projection", "bool", inheritable=True,
                            default=False),
    ]


class Project:
    """
    Project header data, global attributes and the property trees.

    Global attributes are accessed by name: ``project['dailyworkinghours']``.
    """

    def __init__(
        self,
        id: str,
        name: str,
        version: str,
        daily_working_hours: float = 8.0,
        yearly_working_days: float = 260.714,
        timing_resolution: int = 60,
    ):
        self.id = id
        self.name = name
        self.version = version
        self.attributes: dict[str, Any] = {
            "copyright": None,
            "currency": "",
            "currencyformat": RealFormat(
                negative_prefix="(", negative_suffix=")", thousand_separator=",",
                fraction_separator=".", fraction_digits=0,
            ),
            "dailyworkinghours": daily_working_hours,
            "end": None,
            "flags": [],
            "now": datetime.now().replace(microsecond=0),
            "numberformat": RealFormat(fraction_digits=0),
            "scheduleGranularity": timing_resolution * 60,
            "shorttimeformat": "%H:%M",
            "start": None,
            "timeformat": "%Y-%m-%d",
            "timezone": None,
            "vacations": [],
            "weekstartsmonday": True,
            "workinghours": WorkingHours(),
            "yearlyworkingdays": yearly_working_days,
        }
        self.scenarios = PropertySet(self, "scenario", scenario_attributes())
        self.tasks = PropertySet(self, "task", task_attributes())
        self.resources = PropertySet(self, "resource", resource_attributes())
        self.reports: list[Any] = []
        # There is always a top-level scenario; the first scenario
        # declaration replaces it.
        Scenario(self, "plan", "Plan Scenario")

    def __getitem__(self, name: str) -> Any:
        try:
            return self.attributes[name]
        except KeyError:
            raise SemanticError(f"Unknown project attribute '{name}'", "unknown_attribute") from None

    def __setitem__(self, name: str, value: Any) -> None:
        if name not in self.attributes:
            raise SemanticError(f"Unknown project attribute '{name}'", "unknown_attribute")
        self.attributes[name] = value

    def __str__(self) -> str:
        return f"project {self.id}"

    def scenario_idx(self, id: str) -> int | None:
        return self.scenarios.index_of(id)

    def scenario(self, ref: int | str) -> Scenario | None:
        if isinstance(ref, int):
            return self.scenarios[ref] if 0 <= ref < len(self.scenarios) else None
        return self.scenarios.get(ref)

    def task(self, full_id: str) -> Task | None:
        return self.tasks.get(full_id)

    def resource(self, id: str) -> Resource | None:
        return self.resources.get(id)
