"""
Scenario declarations and scenario references.
"""

from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import Scenario
from .common import close_property


def _scenario_header(val: list[Any], ctx: ParseContext) -> Scenario:
    project = ctx.require_project()
    # The first top-level declaration replaces the default scenario.
    if ctx.property is None:
        project.scenarios.clear_properties()
    scenario = Scenario(project, val[1], val[2], ctx.property, ctx.location)
    scenario.inherit_attributes()
    ctx.property = scenario
    return scenario


def _scenario_id(val: list[Any], ctx: ParseContext) -> int:
    idx = ctx.require_project().scenario_idx(val[0])
    if idx is None:
        ctx.error("unknown_scenario_id", f"Unknown scenario: {val[0]}")
    ctx.scenario_idx = idx
    return idx


def _scenario_idx(val: list[Any], ctx: ParseContext) -> int:
    idx = ctx.require_project().scenario_idx(val[0])
    if idx is None:
        ctx.error("unknown_scenario", f"Unknown scenario {val[0]}")
    return idx


def _set_scenario_flag(name: str, value: bool) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        ctx.require_property().set(name, value)

    return action


class ScenarioRules:
    """
    Scenario tree and scenario prefixes.

    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        optional: Any
        repeatable: Any
        new_comma_list_rule: Any
        new_options_rule: Any
        doc: Any
        arg: Any

    def rule_scenario(self) -> None:
        self.new_rule("scenario")
        self.new_pattern(["!scenarioHeader", "!scenarioBody"], close_property)
        self.doc(
            "scenario",
            """
            Specifies the different project scenarios. A scenario that is nested into
            another one inherits all inheritable values from the enclosing scenario. There
            can only be one top-level scenario. It is usually called plan scenario. By
            default this scenario is pre-defined but can be overwritten with any other
            scenario. In this documentation each attribute is listed as scenario specific
            or not. A scenario specific attribute can be overwritten in a child scenario
            thereby creating a new, slightly different variant of the parent scenario.
            This can be helpful to do plan/actual comparisons or what-if analyses.

            By using bookings and enabling the projection mode you can capture the
            progress of your project and constantly get updated project plans for the
            future work.
            """,
        )

    def rule_scenarioHeader(self) -> None:
        self.new_rule("scenarioHeader")
        self.new_pattern(["_scenario", "$ID", "$STRING"], _scenario_header)
        self.arg(1, "id", "The ID of the scenario")
        self.arg(2, "name", "The name of the scenario")

    def rule_scenarioBody(self) -> None:
        self.new_options_rule("scenarioBody", "scenarioAttributes")

    def rule_scenarioAttributes(self) -> None:
        self.new_rule("scenarioAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(["_projection", "!projection"], _set_scenario_flag("projection", True))
        self.doc(
            "projection",
            """
            Enables the projection mode for the scenario. All tasks will be scheduled
            taking the manual bookings into account. The tasks will be extended by
            scheduling new bookings starting with the current date until the specified
            effort, length or duration has been reached.
            """,
        )

        self.new_pattern(["!scenario"])

    def rule_projection(self) -> None:
        self.new_options_rule("projection", "projectionAttributes")

    def rule_projectionAttributes(self) -> None:
        self.new_rule("projectionAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(["_sloppy"], _set_scenario_flag("strict", False))
        self.doc(
            "projection:sloppy",
            "In sloppy mode tasks with no bookings will be filled from the original start.",
        )

        self.new_pattern(["_strict"], _set_scenario_flag("strict", True))
        self.doc(
            "projection:strict",
            """
            In strict mode all tasks will be filled starting with the current date. No
            bookings will be added prior to the current date.
            """,
        )

    def rule_scenarioId(self) -> None:
        self.new_rule("scenarioId")
        self.new_pattern(["$ID_WITH_COLON"], _scenario_id)

    def rule_scenarioIdx(self) -> None:
        self.new_rule("scenarioIdx")
        self.new_pattern(["$ID"], _scenario_idx)

    def rule_scenarioIdList(self) -> None:
        self.new_comma_list_rule("scenarioIdList", "!scenarioIdx")
