"""
Value objects attached to project properties.

These are plain data records built by the semantic actions of the grammar.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..tokens import SourceLocation

DAY_SECONDS = 24 * 60 * 60


class Interval(BaseModel):
    """A time interval; ``end`` is exclusive."""

    start: datetime
    end: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def duration(self) -> float:
        """Length of the interval in seconds."""
        return (self.end - self.start).total_seconds()


class Reference(BaseModel):
    """A URL with an optional label shown instead of the URL."""

    url: str
    label: str | None = None

    model_config = ConfigDict(frozen=True)


class Macro(BaseModel):
    """A named text fragment that is expanded by ``${name}``."""

    name: str
    value: str
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class RealFormat(BaseModel):
    """Formatting rules for real numbers and currency values."""

    negative_prefix: str = "-"
    negative_suffix: str = ""
    thousand_separator: str = ""
    fraction_separator: str = "."
    fraction_digits: int = 0

    model_config = ConfigDict(frozen=True)

    def format(self, value: float) -> str:
        """Render ``value`` according to this format."""
        text = f"{abs(value):.{self.fraction_digits}f}"
        integer, _, fraction = text.partition(".")
        groups = []
        while len(integer) > 3:
            groups.insert(0, integer[-3:])
            integer = integer[:-3]
        groups.insert(0, integer)
        text = self.thousand_separator.join(groups)
        if fraction:
            text += self.fraction_separator + fraction
        if value < 0:
            return f"{self.negative_prefix}{text}{self.negative_suffix}"
        return text


class Allocation(BaseModel):
    """
    Resource allocation of a task.

    Attributes:
        candidates: Resource IDs; the first is the primary, the rest alternatives
        selection_mode: How a candidate is picked when several are available
        persistent: Keep the once picked resource for the whole task
        mandatory: Allocate only if all mandatory resources are available
    """

    candidates: list[str]
    selection_mode: str = "minallocated"
    persistent: bool = False
    mandatory: bool = False


class Booking(BaseModel):
    """Work of a resource on a task during the given intervals."""

    resource: str
    task: str
    intervals: list[Interval] = Field(default_factory=list)
    overtime: int = 0
    sloppy: int = 0
    location: SourceLocation | None = None


class TaskDependency(BaseModel):
    """
    Dependency on (``depends``) or of (``precedes``) another task.

    Gaps are stored in seconds (duration) and in scheduling slots (length).
    """

    task_id: str
    on_end: bool
    gap_duration: int = 0
    gap_length: int = 0


class SortCriterion(BaseModel):
    """One key of a report sorting specification."""

    attribute: str
    ascending: bool = True
    scenario_idx: int = -1

    model_config = ConfigDict(frozen=True)


WEEKDAY_NAMES = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")


def _default_days() -> list[list[tuple[int, int]]]:
    office = [(9 * 3600, 12 * 3600), (13 * 3600, 18 * 3600)]
    return [[] if day in (0, 6) else list(office) for day in range(7)]


class WorkingHours(BaseModel):
    """Working time slots for each weekday, Sunday first, in seconds."""

    days: list[list[tuple[int, int]]] = Field(default_factory=_default_days)

    def set_working_hours(self, day: int, intervals: list[tuple[int, int]]) -> None:
        self.days[day] = list(intervals)

    def on_day(self, day: int) -> list[tuple[int, int]]:
        return self.days[day]

    def weekly_seconds(self) -> int:
        return sum(end - start for day in self.days for start, end in day)
