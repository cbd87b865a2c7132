"""Tests for terminal coercion, durations, intervals and working hours."""

from datetime import datetime

import pytest

from tjp.core.errors import ParseError, SemanticError
from tjp.core.grammar import coerce
from tjp.core.model import Project
from tjp.core.rules.timing import (
    CALENDAR_FACTORS,
    calendar_slots,
    interval_seconds,
    working_factors,
    working_slots,
)
from tjp.core.tokens import SourceLocation, Token, TokenKind

LOCATION = SourceLocation(file="t.tjp", line=1, column=1)


def token(kind: TokenKind, value: str) -> Token:
    return Token(kind, value, LOCATION)


class TestCoerce:
    """Tests for converting typed terminals to Python values."""

    def test_numbers(self) -> None:
        assert coerce(token(TokenKind.INTEGER, "42")) == 42
        assert coerce(token(TokenKind.FLOAT, ".5")) == 0.5

    def test_plain_date(self) -> None:
        assert coerce(token(TokenKind.DATE, "2024-02-29")) == datetime(2024, 2, 29)

    def test_date_with_time(self) -> None:
        value = coerce(token(TokenKind.DATE, "2024-03-01-10:30:15"))
        assert value == datetime(2024, 3, 1, 10, 30, 15)

    def test_time_zone_offset_is_folded_in(self) -> None:
        value = coerce(token(TokenKind.DATE, "2024-03-01-10:00-+0100"))
        assert value == datetime(2024, 3, 1, 9, 0)

    def test_invalid_date(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            coerce(token(TokenKind.DATE, "2023-02-29"))
        assert exc_info.value.code == "bad_date"

    def test_time_of_day(self) -> None:
        assert coerce(token(TokenKind.TIME, "9:15")) == 9 * 3600 + 15 * 60
        assert coerce(token(TokenKind.TIME, "24:00")) == 86400

    def test_time_out_of_range(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            coerce(token(TokenKind.TIME, "24:30"))
        assert exc_info.value.code == "bad_time"

    def test_other_kinds_stay_text(self) -> None:
        assert coerce(token(TokenKind.ABSOLUTE_ID, "a.b")) == "a.b"


class TestDurationFactors:
    """Tests for the calendar and working time conversion factors."""

    def _project(self, resolution_minutes: int = 60) -> Project:
        return Project("p", "P", "1.0", timing_resolution=resolution_minutes)

    def test_calendar_factors(self) -> None:
        assert CALENDAR_FACTORS == (60, 3600, 86400, 604800, 2629728, 31536000)

    def test_working_factors_use_project_settings(self) -> None:
        project = self._project()
        factors = working_factors(project)
        assert factors[0] == 60
        assert factors[1] == 3600
        assert factors[2] == 8 * 3600
        assert factors[3] == pytest.approx(8 * 3600 * 260.714 / 52.1429)
        assert factors[4] == pytest.approx(8 * 3600 * 260.714 / 12)
        assert factors[5] == pytest.approx(8 * 3600 * 260.714)

    def test_calendar_days_in_slots(self) -> None:
        assert calendar_slots(2, 2, self._project()) == 48
        assert calendar_slots(2, 2, self._project(30)) == 96

    def test_working_days_in_slots(self) -> None:
        assert working_slots(2, 2, self._project()) == 16

    def test_working_week_is_about_five_days(self) -> None:
        assert working_slots(1, 3, self._project()) == 40

    def test_interval_seconds(self) -> None:
        assert interval_seconds(3, 3) == 3 * 604800


class TestDurationsInDocuments:
    """Tests for durations parsed from task attributes."""

    def test_task_durations(self, parse) -> None:
        project = parse(
            """
            task t "T" {
              duration 2d
              effort 1.5d
              length 1w
            }
            """
        )
        task = project.task("t")
        assert task["duration", 0] == 48
        assert task["effort", 0] == 12
        assert task["length", 0] == 40

    def test_timing_resolution_changes_slots(self, parse) -> None:
        project = parse(
            'task t "T" { duration 1h }',
            header='project p "P" "1.0" 2024-01-01 - 2024-12-31 { timingresolution 15 min }\n',
        )
        assert project["scheduleGranularity"] == 900
        assert project.task("t")["duration", 0] == 4

    def test_effort_must_be_positive(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse('task t "T" { effort 0d }')
        assert exc_info.value.code == "effort_zero"


class TestIntervals:
    """Tests for intervals and project time frame validation."""

    def test_project_interval(self, parse) -> None:
        project = parse("")
        assert project["start"] == datetime(2024, 1, 1)
        assert project["end"] == datetime(2024, 12, 31)

    def test_interval_with_duration(self, parse) -> None:
        project = parse('task t "T" { period 2024-03-01 +2w }')
        task = project.task("t")
        assert task["start", 0] == datetime(2024, 3, 1)
        assert task["end", 0] == datetime(2024, 3, 15)

    def test_date_outside_project(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse('task t "T" { start 2025-01-01 }')
        assert exc_info.value.code == "date_in_range"

    def test_report_period_must_end_inside_project(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse('export "out.tjp" { period 2024-12-01 - 2025-02-01 }')
        assert exc_info.value.code == "interval_end_in_range"

    def test_report_period_must_start_inside_project(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse('export "out.tjp" { period 2023-12-01 - 2024-02-01 }')
        assert exc_info.value.code == "interval_start_in_range"


class TestWorkingHours:
    """Tests for weekday lists and time intervals."""

    def test_global_working_hours(self, parse) -> None:
        project = parse("workinghours mon, wed - thu 8:00 - 12:00, 13:00 - 17:00\n")
        hours = project["workinghours"]
        shift = [(8 * 3600, 12 * 3600), (13 * 3600, 17 * 3600)]
        assert hours.on_day(1) == shift
        assert hours.on_day(3) == shift
        assert hours.on_day(4) == shift
        assert hours.on_day(2) == [(9 * 3600, 12 * 3600), (13 * 3600, 18 * 3600)]

    def test_weekday_range_wraps_around_the_week(self, parse) -> None:
        project = parse("workinghours sat - mon off\n")
        hours = project["workinghours"]
        assert hours.on_day(6) == []
        assert hours.on_day(0) == []
        assert hours.on_day(1) == []
        assert hours.on_day(2) != []

    def test_resource_working_hours(self, parse) -> None:
        project = parse('resource r "R" { workinghours fri 10:00 - 14:00 }')
        resource = project.resource("r")
        assert resource["workinghours", 0].on_day(5) == [(10 * 3600, 14 * 3600)]
        assert project["workinghours"].on_day(5) != [(10 * 3600, 14 * 3600)]

    def test_time_interval_must_advance(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse("workinghours mon 17:00 - 9:00\n")
        assert exc_info.value.code == "time_interval"
