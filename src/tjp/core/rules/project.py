"""
Project header, project attributes and the global property list.
"""

import logging
from typing import TYPE_CHECKING, Any

from ..config import DefaultsConfig
from ..context import ParseContext
from ..model import Macro, Project, RealFormat

logger = logging.getLogger(__name__)

MACRO_DATE_FORMAT = "%Y-%m-%d-%H:%M"


def _add_macro(ctx: ParseContext, name: str, value: str) -> None:
    if ctx.scanner is not None:
        ctx.scanner.add_macro(Macro(name=name, value=value, location=ctx.location))


def _project_header(val: list[Any], ctx: ParseContext) -> Project:
    defaults = ctx.config.defaults if ctx.config is not None else DefaultsConfig()
    project = Project(
        val[1],
        val[2],
        val[3],
        daily_working_hours=defaults.daily_working_hours,
        yearly_working_days=defaults.yearly_working_days,
        timing_resolution=defaults.timing_resolution,
    )
    interval = val[4]
    project["start"] = interval.start
    project["end"] = interval.end
    ctx.project = project
    ctx.property = None
    _add_macro(ctx, "projectstart", interval.start.strftime(MACRO_DATE_FORMAT))
    _add_macro(ctx, "projectend", interval.end.strftime(MACRO_DATE_FORMAT))
    _add_macro(ctx, "now", project["now"].strftime(MACRO_DATE_FORMAT))
    logger.debug("Project %s from %s to %s", project.id, interval.start, interval.end)
    return project


def _real_format(val: list[Any], ctx: ParseContext) -> RealFormat:
    if not val[5].isdigit():
        ctx.error("bad_fraction_digits", f"Number of fraction digits expected, got '{val[5]}'")
    return RealFormat(
        negative_prefix=val[1],
        negative_suffix=val[2],
        thousand_separator=val[3],
        fraction_separator=val[4],
        fraction_digits=int(val[5]),
    )


def _set_project_attribute(name: str, index: int = 1) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        ctx.require_project()[name] = val[index]

    return action


def _currency_format(val: list[Any], ctx: ParseContext) -> None:
    ctx.require_project()["currencyformat"] = _real_format(val, ctx)


def _number_format(val: list[Any], ctx: ParseContext) -> None:
    ctx.require_project()["numberformat"] = _real_format(val, ctx)


def _now(val: list[Any], ctx: ParseContext) -> None:
    ctx.require_project()["now"] = val[1]
    _add_macro(ctx, "now", val[1].strftime(MACRO_DATE_FORMAT))


def _timing_resolution(val: list[Any], ctx: ParseContext) -> None:
    if val[1] < 5:
        ctx.error("min_timing_res", "Timing resolution must be at least 5 min.")
    if val[1] > 60:
        ctx.error("max_timing_res", "Timing resolution must be 1 hour or less.")
    ctx.require_project()["scheduleGranularity"] = val[1] * 60


def _declare_flags(val: list[Any], ctx: ParseContext) -> None:
    flags = ctx.require_project()["flags"]
    for flag in val[1]:
        if flag not in flags:
            flags.append(flag)


def _global_vacation(val: list[Any], ctx: ParseContext) -> None:
    project = ctx.require_project()
    project["vacations"] = project["vacations"] + val[2]


def _include(val: list[Any], ctx: ParseContext) -> None:
    if ctx.scanner is None:
        ctx.error("include_unsupported", "Files can only be included when parsing from a scanner")
    ctx.scanner.include(val[1])


def _macro(val: list[Any], ctx: ParseContext) -> None:
    _add_macro(ctx, val[1], val[2])


def _flag(val: list[Any], ctx: ParseContext) -> str:
    if val[0] not in ctx.require_project()["flags"]:
        ctx.error("undecl_flag", f"Undeclared flag {val[0]}")
    return val[0]


def _start_supplement(val: list[Any], ctx: ParseContext) -> None:
    ctx.property = val[1]


def _end_supplement(val: list[Any], ctx: ParseContext) -> None:
    ctx.property = None


class ProjectRules:
    """
    Project declaration and global scope.

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

    def rule_project(self) -> None:
        self.new_rule("project")
        self.new_pattern(["!projectDeclaration", "!properties"], lambda val, ctx: val[0])
        self.new_pattern(["!macro"])

    def rule_projectDeclaration(self) -> None:
        self.new_rule("projectDeclaration")
        self.new_pattern(["!projectHeader", "!projectBody"], lambda val, ctx: val[0])
        self.doc(
            "project",
            """
            The project property is mandatory and should be the first property
            in a project file. It is used to capture basic attributes such as
            the project id, name and the expected time frame.
            """,
        )

    def rule_projectHeader(self) -> None:
        self.new_rule("projectHeader")
        self.new_pattern(["_project", "$ID", "$STRING", "$STRING", "!interval"], _project_header)
        self.arg(1, "id", "The ID of the project")
        self.arg(2, "name", "The name of the project")
        self.arg(3, "version", "The version of the project plan")
        self.arg(4, "interval", "The time frame of the project")

    def rule_projectBody(self) -> None:
        self.new_options_rule("projectBody", "projectBodyAttributes")

    def rule_projectBodyAttributes(self) -> None:
        self.new_rule("projectBodyAttributes")
        self.repeatable()
        self.optional()

        self.new_pattern(
            ["_currencyformat", "$STRING", "$STRING", "$STRING", "$STRING", "$STRING"],
            _currency_format,
        )
        self.doc("currencyformat", "These values specify the default format used for all currency values.")
        self._real_format_args()

        self.new_pattern(["_currency", "$STRING"], _set_project_attribute("currency"))
        self.doc("currency", "The default currency unit.")
        self.arg(1, "symbol", "Currency symbol")

        self.new_pattern(["_dailyworkinghours", "!number"], _set_project_attribute("dailyworkinghours"))
        self.doc(
            "dailyworkinghours",
            """
            Set the average number of working hours per day. This is used as
            the base to convert working hours into working days. This affects
            for example the length task attribute. The default value is 8 hours
            and should work for most Western countries. The value you specify
            should match the settings you specified for workinghours.
            """,
        )
        self.arg(1, "hours", "Average number of working hours per working day")

        self.new_pattern(["_extend", "!extendProperty", "!extendBody"], _extend_done)
        self.doc(
            "extend",
            """
            Often it is desirable to collect more information in the project file than is
            necessary for task scheduling and resource allocation. To add such information
            to tasks, resources or accounts the user can extend these properties with
            user-defined attributes. The new attributes can be text or reference
            attributes. Optionally the user can specify if the attribute value should be
            inherited from the enclosing property.
            """,
        )
        self.arg(1, "property", "The property type to extend: task or resource")

        self.new_pattern(["!include"])

        self.new_pattern(["_now", "$DATE"], _now)
        self.doc(
            "now",
            """
            Specify the date that is used for calculation as current
            date. If no value is specified, the current value of the system
            clock is used.
            """,
        )
        self.arg(1, "date", "Alternative date to be used as current date for all computations")

        self.new_pattern(
            ["_numberformat", "$STRING", "$STRING", "$STRING", "$STRING", "$STRING"],
            _number_format,
        )
        self.doc("numberformat", "These values specify the default format used for all numerical real values.")
        self._real_format_args()

        self.new_pattern(["!scenario"])

        self.new_pattern(["_shorttimeformat", "$STRING"], _set_project_attribute("shorttimeformat"))
        self.doc(
            "shorttimeformat",
            "Specifies time format for time short specifications. This is normally "
            "just the hour and minutes.",
        )
        self.arg(1, "format", "strftime like format string")

        self.new_pattern(["_timeformat", "$STRING"], _set_project_attribute("timeformat"))
        self.doc("timeformat", "Determines how time specifications in reports look like.")
        self.arg(1, "format", "strftime like format string")

        self.new_pattern(["!timezone"], _set_project_attribute("timezone", 0))

        self.new_pattern(["_timingresolution", "$INTEGER", "_min"], _timing_resolution)
        self.doc(
            "timingresolution",
            """
            Sets the minimum timing resolution. The smaller the value, the longer the
            scheduling process lasts and the more memory the application needs. The
            default and maximum value is 1 hour. The smallest value is 5 min.
            This value is a pretty fundamental setting. It has a severe
            impact on memory usage and scheduling performance. You should set this value
            to the minimum required resolution. Make sure that all values that you specify
            are aligned with the resolution.

            The timing resolution should be set prior to any value that represents a time
            value like now or workinghours.
            """,
        )
        self.arg(1, "resolution", "The minimum interval that the scheduler uses to align tasks")

        self.new_pattern(["_weekstartsmonday"], _week_starts(True))
        self.doc(
            "weekstartsmonday",
            "Specify that you want to base all week calculation on weeks "
            "starting on Monday. This is common in many European countries.",
        )

        self.new_pattern(["_weekstartssunday"], _week_starts(False))
        self.doc(
            "weekstartssunday",
            "Specify that you want to base all week calculation on weeks "
            "starting on Sunday. This is common in the United States of America.",
        )

        self.new_pattern(["_yearlyworkingdays", "!number"], _set_project_attribute("yearlyworkingdays"))
        self.doc(
            "yearlyworkingdays",
            """
            Specifies the number of average working days per year. This should correlate
            to the specified workinghours and vacation. It affects the conversion of
            working hours, working days, working weeks, working months and working years
            into each other.

            When public holidays and vacations are disregarded, this value should be equal
            to the number of working days per week times 52.1428 (the average number of
            weeks per year). E. g. for a culture with 5 working days it is 260.714 (the
            default), for 6 working days it is 312.8568 and for 7 working days it is
            365.
            """,
        )
        self.arg(1, "days", "Number of average working days for a year")

    def _real_format_args(self) -> None:
        self.arg(1, "negativeprefix", "Prefix for negative numbers")
        self.arg(2, "negativesuffix", "Suffix for negative numbers")
        self.arg(3, "thousandsep", "Separator used for every 3rd digit")
        self.arg(4, "fractionsep", "Separator used to separate the fraction digits")
        self.arg(5, "fractiondigits", "Number of fraction digits to show")

    def rule_timezone(self) -> None:
        self.new_rule("timezone")
        self.new_pattern(["_timezone", "$STRING"], lambda val, ctx: val[1])
        self.doc(
            "timezone",
            """
            Sets the default timezone of the project. All times that have no time
            zones specified will be assumed to be in this timezone. The value must
            be a string just like those used for the TZ environment variable. Most
            Linux systems have a command line utility called tzselect to lookup
            possible values.

            The project start and end time are not affected by this setting. You
            have to explicitly state the timezone for those dates or the system
            defaults are assumed.
            """,
        )
        self.arg(1, "zone", "Time zone to use. E. g. Europe/Berlin")

    def rule_include(self) -> None:
        self.new_rule("include")
        self.new_pattern(["_include", "$STRING"], _include)
        self.doc(
            "include",
            """
            Includes the specified file name as if its contents would be written
            instead of the include property. The only exception is the include
            statement itself. When the included files contains other include
            statements or report definitions, the filenames are relative to file
            where they are defined in. include commands can be used in the project
            header, at global scope or between property declarations of tasks,
            resources, and accounts.
            """,
        )
        self.arg(1, "filename", "Name of the file to include, relative to the including file")

    def rule_macro(self) -> None:
        self.new_rule("macro")
        self.new_pattern(["_macro", "$ID", "$MACRO"], _macro)

    def rule_properties(self) -> None:
        self.new_rule("properties")
        self.repeatable()
        self.optional()
        self.new_pattern(["_copyright", "$STRING"], _set_project_attribute("copyright"))
        self.new_pattern(["!include"])
        self.new_pattern(["_flags", "!declareFlagList"], _declare_flags)
        self.new_pattern(["!macro"])
        self.new_pattern(["!report"])
        self.new_pattern(["!resource"])
        self.new_pattern(["_supplement", "!supplement"])
        self.new_pattern(["!task"])
        self.new_pattern(["_vacation", "!vacationName", "!intervals"], _global_vacation)
        self.new_pattern(["!workinghours"])

    def rule_declareFlagList(self) -> None:
        self.new_comma_list_rule("declareFlagList", "$ID")

    def rule_flag(self) -> None:
        self.new_rule("flag")
        self.new_pattern(["$ID"], _flag)

    def rule_flagList(self) -> None:
        self.new_comma_list_rule("flagList", "!flag")

    def rule_supplement(self) -> None:
        self.new_rule("supplement")
        self.new_pattern(["!supplementResource", "!resourceBody"], _end_supplement)
        self.new_pattern(["!supplementTask", "!taskBody"], _end_supplement)

    def rule_supplementResource(self) -> None:
        self.new_rule("supplementResource")
        self.new_pattern(["_resource", "!resourceId"], _start_supplement)

    def rule_supplementTask(self) -> None:
        self.new_rule("supplementTask")
        self.new_pattern(["_task", "!taskId"], _start_supplement)

    def rule_vacationName(self) -> None:
        self.new_rule("vacationName")
        self.optional()
        self.single_pattern("$STRING")


def _extend_done(val: list[Any], ctx: ParseContext) -> None:
    logger.debug("Finished extending %s", ctx.extend_target)
    ctx.extend_target = None


def _week_starts(monday: bool) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        ctx.require_project()["weekstartsmonday"] = monday

    return action
