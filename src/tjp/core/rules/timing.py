"""
Time related rules: numbers, durations, intervals and working hours.

Durations are converted to scheduling slots of the project's timing
resolution; interval durations (``+ 2w``) are converted to seconds.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import Interval, Project

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 2629728  # 30.4167 days
YEAR = 365 * DAY

CALENDAR_FACTORS = (MINUTE, HOUR, DAY, WEEK, MONTH, YEAR)
WEEKS_PER_YEAR = 52.1429

DURATION_UNITS = ("min", "h", "d", "w", "m", "y")


def working_factors(project: Project) -> tuple[float, ...]:
    """Seconds of working time per duration unit."""
    day = project["dailyworkinghours"] * HOUR
    yearly_days = project["yearlyworkingdays"]
    return (
        MINUTE,
        HOUR,
        day,
        day * (yearly_days / WEEKS_PER_YEAR),
        day * (yearly_days / 12),
        day * yearly_days,
    )


def calendar_slots(value: float, unit: int, project: Project) -> int:
    """Calendar duration in scheduling slots, truncated."""
    return int(value * CALENDAR_FACTORS[unit] / project["scheduleGranularity"])


def working_slots(value: float, unit: int, project: Project) -> int:
    """Working time duration in scheduling slots, rounded."""
    return round(value * working_factors(project)[unit] / project["scheduleGranularity"])


def interval_seconds(value: int, unit: int) -> int:
    return int(value * CALENDAR_FACTORS[unit])


def _calendar_duration(val: list[Any], ctx: ParseContext) -> int:
    return calendar_slots(val[0], val[1], ctx.require_project())


def _working_duration(val: list[Any], ctx: ParseContext) -> int:
    return working_slots(val[0], val[1], ctx.require_project())


def _interval_duration(val: list[Any], ctx: ParseContext) -> int:
    return interval_seconds(val[0], val[1])


def _make_interval(val: list[Any]) -> Interval:
    start = val[0]
    mode, end_spec = val[1]
    if mode == 0:
        return Interval(start=start, end=end_spec)
    return Interval(start=start, end=start + timedelta(seconds=end_spec))


def _interval(val: list[Any], ctx: ParseContext) -> Interval:
    return _make_interval(val)


def _val_interval(val: list[Any], ctx: ParseContext) -> Interval:
    project = ctx.require_project()
    iv = _make_interval(val)
    if iv.start < project["start"] or iv.start >= project["end"]:
        ctx.error(
            "interval_start_in_range",
            f"Start date {iv.start} must be within the project time frame",
        )
    if iv.end <= project["start"] or iv.end > project["end"]:
        ctx.error(
            "interval_end_in_range",
            f"End date {iv.end} must be within the project time frame",
        )
    return iv


def _val_date(val: list[Any], ctx: ParseContext) -> Any:
    project = ctx.require_project()
    if val[0] < project["start"] or val[0] > project["end"]:
        ctx.error(
            "date_in_range",
            f"Date must be within the project time frame {project['start']} - {project['end']}",
        )
    return val[0]


def _week_day_interval(val: list[Any], ctx: ParseContext) -> list[bool]:
    weekdays = [False] * 7
    first, last = val[0], val[1]
    if last is None:
        weekdays[first] = True
    else:
        if last < first:
            last += 7
        for day in range(first, last + 1):
            weekdays[day % 7] = True
    return weekdays


def _list_of_days(val: list[Any], ctx: ParseContext) -> list[bool]:
    weekdays = [False] * 7
    for day_list in val[0]:
        for day, on in enumerate(day_list):
            weekdays[day] = weekdays[day] or on
    return weekdays


def _time_interval(val: list[Any], ctx: ParseContext) -> tuple[int, int]:
    if val[0] >= val[2]:
        ctx.error("time_interval", "End time of interval must be larger than start time")
    return (val[0], val[2])


def _workinghours(val: list[Any], ctx: ParseContext) -> None:
    if ctx.property is None:
        working_hours = ctx.require_project()["workinghours"]
    else:
        working_hours = ctx.property["workinghours", ctx.scenario_idx]
    for day in range(7):
        if val[1][day]:
            working_hours.set_working_hours(day, val[2])


class TimingRules:
    """
    Numbers, durations, dates, intervals and working hours.

    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        single_pattern: Any
        optional: Any
        new_list_rule: Any
        new_comma_list_rule: Any
        doc: Any
        arg: Any

    def rule_number(self) -> None:
        self.new_rule("number")
        self.single_pattern("$INTEGER")
        self.single_pattern("$FLOAT")

    def rule_durationUnit(self) -> None:
        self.new_rule("durationUnit")
        for index, unit in enumerate(DURATION_UNITS):
            self.new_pattern([f"_{unit}"], lambda val, ctx, index=index: index)

    def rule_calendarDuration(self) -> None:
        self.new_rule("calendarDuration")
        self.new_pattern(["!number", "!durationUnit"], _calendar_duration)
        self.arg(0, "value", "A floating point or integer number")

    def rule_workingDuration(self) -> None:
        self.new_rule("workingDuration")
        self.new_pattern(["!number", "!durationUnit"], _working_duration)
        self.arg(0, "value", "A floating point or integer number")

    def rule_intervalDuration(self) -> None:
        self.new_rule("intervalDuration")
        self.new_pattern(["$INTEGER", "!durationUnit"], _interval_duration)
        self.arg(0, "duration", "The duration of the interval")

    def rule_interval(self) -> None:
        self.new_rule("interval")
        self.new_pattern(["$DATE", "!intervalEnd"], _interval)
        self.arg(0, "start date", "The start date of the interval")

    def rule_intervalEnd(self) -> None:
        self.new_rule("intervalEnd")
        self.new_pattern(["_-", "$DATE"], lambda val, ctx: (0, val[1]))
        self.arg(1, "end date", "The end date of the interval")
        self.new_pattern(["_+", "!intervalDuration"], lambda val, ctx: (1, val[1]))

    def rule_intervals(self) -> None:
        self.new_list_rule("intervals", "!interval")

    def rule_valDate(self) -> None:
        self.new_rule("valDate")
        self.new_pattern(["$DATE"], _val_date)

    def rule_valInterval(self) -> None:
        self.new_rule("valInterval")
        self.new_pattern(["$DATE", "!intervalEnd"], _val_interval)

    def rule_weekday(self) -> None:
        self.new_rule("weekday")
        for index, name in enumerate(("sun", "mon", "tue", "wed", "thu", "fri", "sat")):
            self.new_pattern([f"_{name}"], lambda val, ctx, index=index: index)

    def rule_weekDayInterval(self) -> None:
        self.new_rule("weekDayInterval")
        self.new_pattern(["!weekday", "!weekDayIntervalEnd"], _week_day_interval)
        self.arg(0, "weekday", "Weekday (sun - sat)")

    def rule_weekDayIntervalEnd(self) -> None:
        self.new_rule("weekDayIntervalEnd")
        self.optional()
        self.new_pattern(["_-", "!weekday"], lambda val, ctx: val[1])
        self.arg(1, "end weekday", "Weekday (sun - sat). It is included in the interval.")

    def rule_listOfDays(self) -> None:
        self.new_rule("listOfDays")
        self.new_pattern(["!weekDayIntervals"], _list_of_days)

    def rule_weekDayIntervals(self) -> None:
        self.new_comma_list_rule("weekDayIntervals", "!weekDayInterval")

    def rule_listOfTimes(self) -> None:
        self.new_rule("listOfTimes")
        self.new_pattern(["_off"], lambda val, ctx: [])
        self.new_pattern(["!timeIntervals"], lambda val, ctx: val[0])

    def rule_timeIntervals(self) -> None:
        self.new_comma_list_rule("timeIntervals", "!timeInterval")

    def rule_timeInterval(self) -> None:
        self.new_rule("timeInterval")
        self.new_pattern(["$TIME", "_-", "$TIME"], _time_interval)

    def rule_workinghours(self) -> None:
        self.new_rule("workinghours")
        self.new_pattern(["_workinghours", "!listOfDays", "!listOfTimes"], _workinghours)
        self.doc(
            "workinghours",
            """
            The working hours specification limits the availability of resources to
            certain time slots of week days.
            """,
        )
        self.arg(1, "weekdays", "Comma separated list of weekdays or weekday intervals")
        self.arg(2, "times", "Comma separated list of time intervals or 'off'")
