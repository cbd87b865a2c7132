"""
Report definitions: report header, table columns, filters and sorting.
"""

import logging
from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import ColumnDefinition, Report, ReportType, SortCriterion

logger = logging.getLogger(__name__)

SORTING_HINT = "Sorting criterium expected (e.g. tree, start.up or plan.end.down)."


def _report_header(val: list[Any], ctx: ParseContext) -> Report:
    report = Report(ctx.require_project(), ReportType(val[0]), val[1])
    ctx.report = report
    ctx.report_element = report.element
    logger.debug("Defined %s report '%s'", report.type.value, report.file_name)
    return report


def _end_report(val: list[Any], ctx: ParseContext) -> Report:
    report = val[0]
    ctx.report = None
    ctx.report_element = None
    return report


def _set_element(attribute: str) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        setattr(ctx.report_element, attribute, val[1])

    return action


def _period(val: list[Any], ctx: ParseContext) -> None:
    ctx.report_element.start = val[1].start
    ctx.report_element.end = val[1].end


def _scenarios(val: list[Any], ctx: ParseContext) -> None:
    project = ctx.require_project()
    # Disabled scenarios are not reported.
    ctx.report_element.scenarios = [
        idx for idx in val[1] if project.scenario(idx).get("enabled")
    ]


def _column_id(val: list[Any], ctx: ParseContext) -> ColumnDefinition:
    title = ctx.report_element.default_column_title(val[0])
    if title is None:
        ctx.error("report_column", f"Unknown column {val[0]}")
    ctx.column = ColumnDefinition(id=val[0], title=title)
    return ctx.column


def _column_title(val: list[Any], ctx: ParseContext) -> None:
    ctx.column.title = val[1]


def _direction(text: str, ctx: ParseContext) -> bool:
    if text not in ("up", "down"):
        ctx.error("sorting_direction", "Sorting direction must be 'up' or 'down'")
    return text == "up"


def _sort_by_attribute(val: list[Any], ctx: ParseContext) -> SortCriterion:
    parts = val[0].split(".")
    if len(parts) == 2:
        attribute, direction = parts
        return SortCriterion(attribute=attribute, ascending=_direction(direction, ctx))
    if len(parts) == 3:
        scenario, attribute, direction = parts
        scenario_idx = ctx.require_project().scenario_idx(scenario)
        if scenario_idx is None:
            ctx.error("unknown_scenario", f"Unknown scenario {scenario} in sorting criterium")
        return SortCriterion(
            attribute=attribute,
            ascending=_direction(direction, ctx),
            scenario_idx=scenario_idx,
        )
    ctx.error("sorting_crit_exptd1", SORTING_HINT)


def _sort_by_tree(val: list[Any], ctx: ParseContext) -> SortCriterion:
    if val[0] != "tree":
        ctx.error("sorting_crit_exptd2", SORTING_HINT)
    return SortCriterion(attribute="tree")


class ReportRules:
    """
    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        single_pattern: Any
        optional: Any
        repeatable: Any
        new_comma_list_rule: Any
        new_options_rule: Any
        doc: Any
        arg: Any
        also: Any

    def rule_report(self) -> None:
        self.new_rule("report")
        self.new_pattern(["!reportHeader", "!reportBody"], _end_report)
        self.doc(
            "report",
            """
            Defines a report. The report type determines what the generated file
            contains. Export reports write the project in the syntax of this language,
            the HTML reports produce a table of tasks or resources.
            """,
        )

    def rule_reportHeader(self) -> None:
        self.new_rule("reportHeader")
        self.new_pattern(["!reportType", "$STRING"], _report_header)
        self.arg(0, "type", "One of export, htmltaskreport or htmlresourcereport")
        self.arg(1, "file name", "The name of the report file to generate. It may include a path.")

    def rule_reportType(self) -> None:
        self.new_rule("reportType")
        for report_type in ReportType:
            self.single_pattern(f"_{report_type.value}")

    def rule_reportBody(self) -> None:
        self.new_options_rule("reportBody", "reportAttributes")

    def rule_reportAttributes(self) -> None:
        self.new_rule("reportAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(["_columns", "!columnDefs"], _set_element("columns"))
        self.doc(
            "columns",
            """
            Specifies which columns shall be included in a report. Columns are shown in
            the order of this list. Besides the built-in columns every user defined
            attribute can be used as a column.
            """,
        )
        self.arg(1, "columns", "Comma separated list of column IDs")

        self.new_pattern(["_end", "!valDate"], _set_element("end"))
        self.doc("report:end", "Specifies the end date of the report period.")
        self.also(["report:start", "report:period"])

        self.new_pattern(["_headline", "$STRING"], _set_element("headline"))
        self.doc("headline", "Specifies the headline for a report.")
        self.arg(1, "text", "The text used for the headline")

        self.new_pattern(["_hideresource", "!logicalExpression"], _set_element("hide_resource"))
        self.doc(
            "hideresource",
            """
            Do not include resources that match the specified logical expression. If the
            report is sorted in tree mode (default) then enclosing resources are listed
            even if the expression matches the resource.
            """,
        )
        self.also(["sortresources"])

        self.new_pattern(["_hidetask", "!logicalExpression"], _set_element("hide_task"))
        self.doc(
            "hidetask",
            """
            Do not include tasks that match the specified logical expression. If the
            report is sorted in tree mode (default) then enclosing tasks are listed even
            if the expression matches the task.
            """,
        )
        self.also(["sorttasks"])

        self.new_pattern(["_period", "!valInterval"], _period)
        self.doc(
            "report:period",
            """
            This property is a shortcut for setting the start and end property of the
            report at the same time.
            """,
        )

        self.new_pattern(["_rolluptask", "!logicalExpression"], _set_element("rollup_task"))
        self.doc(
            "rolluptask",
            """
            Do not show sub-tasks of tasks that match the specified logical expression.
            """,
        )

        self.new_pattern(["_scenarios", "!scenarioIdList"], _scenarios)
        self.doc(
            "scenarios",
            """
            List of scenarios that should be included in the report. Disabled scenarios
            are silently dropped from the list.
            """,
        )
        self.arg(1, "scenarios", "Comma separated list of scenario IDs")

        self.new_pattern(["_sortresources", "!sortCriteria"], _set_element("sort_resources"))
        self.doc(
            "sortresources",
            """
            Determines how the resources are sorted in the report. Multiple criteria can
            be specified as a comma separated list. If one criteria is not sufficient to
            sort a group of resources, the next criteria will be used to sort the
            resources in this group.
            """,
        )
        self.arg(1, "criteria", "^sortcriteria")

        self.new_pattern(["_sorttasks", "!sortCriteria"], _set_element("sort_tasks"))
        self.doc(
            "sorttasks",
            """
            Determines how the tasks are sorted in the report. Multiple criteria can be
            specified as comma separated list. If one criteria is not sufficient to sort
            a group of tasks, the next criteria will be used to sort the tasks within
            this group.
            """,
        )
        self.arg(1, "criteria", "^sortcriteria")

        self.new_pattern(["_start", "!valDate"], _set_element("start"))
        self.doc("report:start", "Specifies the start date of the report period.")
        self.also(["report:end", "report:period"])

        self.new_pattern(["_taskroot", "!taskId"], _set_element("task_root"))
        self.doc(
            "taskroot",
            """
            Only tasks below the specified root-level tasks are exported. The exported
            tasks will have the ID of the root-level task stripped from their ID, so that
            the sub-tasks of the root-level task become top-level tasks in the exported
            file.
            """,
        )
        self.arg(1, "task", "ID of a defined task")

        self.new_pattern(["_timeformat", "$STRING"], _set_element("timeformat"))
        self.doc(
            "report:timeformat",
            "Determines how time specifications in reports look like.",
        )
        self.arg(1, "format", "A strftime style format string")
        self.also(["timeformat"])

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def rule_columnDefs(self) -> None:
        self.new_comma_list_rule("columnDefs", "!columnDef")

    def rule_columnDef(self) -> None:
        self.new_rule("columnDef")
        self.new_pattern(["!columnId", "!columnBody"], lambda val, ctx: val[0])

    def rule_columnId(self) -> None:
        self.new_rule("columnId")
        self.new_pattern(["$ID"], _column_id)

    def rule_columnBody(self) -> None:
        self.new_options_rule("columnBody", "columnOptions")

    def rule_columnOptions(self) -> None:
        self.new_rule("columnOptions")
        self.optional()
        self.repeatable()
        self.new_pattern(["_title", "$STRING"], _column_title)
        self.doc("title", "Specifies an alternative title for a report column.")
        self.arg(1, "text", "The new column title")

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def rule_sortCriteria(self) -> None:
        self.new_comma_list_rule("sortCriteria", "!sortCriterium")

    def rule_sortCriterium(self) -> None:
        self.new_rule("sortCriterium")
        self.new_pattern(["$ABSOLUTE_ID"], _sort_by_attribute)
        self.doc(
            "sortcriteria",
            """
            A sorting criterium is either 'tree' or an attribute ID followed by the
            direction, e.g. 'start.up'. The attribute may be prefixed with a scenario ID
            to sort by the value of a certain scenario, e.g. 'plan.end.down'.
            """,
        )
        self.new_pattern(["$ID"], _sort_by_tree)
