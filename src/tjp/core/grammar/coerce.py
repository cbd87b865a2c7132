"""
Conversion of typed terminal tokens into Python values.
"""

import re
from datetime import datetime, timedelta
from typing import Any

from ..errors import make_parse_error
from ..tokens import Token, TokenKind

DATE_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
    r"(?:-(?P<hour>\d{1,2}):(?P<minute>\d{1,2})(?::(?P<second>\d{1,2}))?)?"
    r"(?:-(?P<sign>[+-])(?P<tzh>\d{2})(?P<tzm>\d{2}))?$"
)
TIME_RE = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})$")


def _error(token: Token, message: str, code: str) -> Exception:
    loc = token.location
    return make_parse_error(message, code, loc.file, loc.line, loc.column)


def parse_date(token: Token) -> datetime:
    """
    Parse ``YYYY-MM-DD[-hh:mm[:ss]][-+hhmm]``.

    A time zone offset is folded in, the result is a naive UTC-based time.
    """
    match = DATE_RE.match(token.value)
    if match is None:
        raise _error(token, f"Malformed date '{token.value}'", "bad_date")
    parts = match.groupdict()
    try:
        value = datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
        )
    except ValueError as e:
        raise _error(token, f"Invalid date '{token.value}': {e}", "bad_date") from None
    if parts["sign"]:
        offset = timedelta(hours=int(parts["tzh"]), minutes=int(parts["tzm"]))
        value = value - offset if parts["sign"] == "+" else value + offset
    return value


def parse_time(token: Token) -> int:
    """Parse ``hh:mm`` into seconds since midnight (``24:00`` is allowed)."""
    match = TIME_RE.match(token.value)
    if match is None:
        raise _error(token, f"Malformed time '{token.value}'", "bad_time")
    hour, minute = int(match["hour"]), int(match["minute"])
    if minute > 59 or hour > 24 or (hour == 24 and minute > 0):
        raise _error(token, f"Time '{token.value}' is out of range", "bad_time")
    return hour * 3600 + minute * 60


def coerce(token: Token) -> Any:
    """Return the Python value of a typed terminal."""
    if token.kind == TokenKind.INTEGER:
        try:
            return int(token.value)
        except ValueError:
            raise _error(token, f"Malformed integer '{token.value}'", "bad_integer") from None
    if token.kind == TokenKind.FLOAT:
        try:
            return float(token.value)
        except ValueError:
            raise _error(token, f"Malformed number '{token.value}'", "bad_float") from None
    if token.kind == TokenKind.DATE:
        return parse_date(token)
    if token.kind == TokenKind.TIME:
        return parse_time(token)
    return token.value
