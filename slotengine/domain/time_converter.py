"""
Conversions between local wall-clock strings, calendar dates and instants.

Every slot boundary is derived from a single anchor (local midnight of the
requested date in the provider's timezone) plus a number of minutes. The
anchor is resolved through the timezone database, so the UTC offset is the
one in force on that specific date.
"""

from __future__ import annotations

import logging
import re
from datetime import date as stdlib_date
from datetime import datetime
from typing import Any, Optional

import pendulum
from pendulum import Date, DateTime

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Europe/London"

MINUTES_PER_DAY = 24 * 60

# Index 0 is Monday, matching ``date.isoweekday() - 1``.
WEEKDAY_TOKENS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

_HHMM_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

# Instants must carry a calendar date; bare times and keywords like "now" are
# resolved against the wall clock by the parser.
_DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-?\d{2}-?\d{2}[T ]\d")


def to_minutes(hhmm: str) -> int:
    """
    Convert a local ``H:MM`` or ``HH:MM`` string to minutes since midnight.

    Raises:
        ValueError: If the value is not a valid wall-clock time.
    """
    match = _HHMM_PATTERN.match(hhmm.strip()) if isinstance(hhmm, str) else None
    if not match:
        raise ValueError(f"Invalid HH:MM time: {hhmm!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {hhmm!r}")

    return hours * 60 + minutes


def to_hhmm(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_date(value: Any) -> Optional[Date]:
    """
    Parse a ``YYYY-MM-DD`` string (or a date object) into a calendar date.

    Returns None when the value cannot be understood as a date.
    """
    if isinstance(value, datetime):
        return pendulum.date(value.year, value.month, value.day)

    if isinstance(value, stdlib_date):
        return pendulum.date(value.year, value.month, value.day)

    if not isinstance(value, str):
        return None

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
    except ValueError:
        return None


def is_valid_timezone(name: str) -> bool:
    """Check whether ``name`` is a known IANA timezone."""
    try:
        pendulum.timezone(name)
    except (ValueError, LookupError):
        return False
    return True


def anchor_day(day: Date, timezone: str) -> DateTime:
    """
    Return the instant of local midnight for ``day`` in ``timezone``.

    Raises:
        ValueError: If the timezone is unknown.
    """
    return pendulum.datetime(day.year, day.month, day.day, tz=timezone)


def at_minutes(anchor: DateTime, minutes: int) -> DateTime:
    """Offset an anchor by an exact number of minutes."""
    return anchor.add(minutes=minutes)


def weekday_token(day: Date) -> str:
    """Return the ``mon``..``sun`` token for a calendar date."""
    return WEEKDAY_TOKENS[day.isoweekday() - 1]


def parse_instant(value: Any) -> Optional[DateTime]:
    """
    Parse an absolute instant from an ISO-8601 string or datetime.

    Naive values are interpreted as UTC. Returns None for anything that does
    not describe a concrete instant, including bare dates and times.
    """
    if isinstance(value, datetime):
        return pendulum.instance(value)

    if not isinstance(value, str) or not _DATE_PREFIX_PATTERN.match(value.strip()):
        logger.debug("Timestamp %r has no date and time", value)
        return None

    try:
        parsed = pendulum.parse(value.strip(), exact=True)
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None

    if not isinstance(parsed, DateTime):
        logger.debug("Timestamp %r is not a date-time", value)
        return None

    return parsed


def now_instant() -> DateTime:
    """Read the current instant in UTC."""
    return pendulum.now("UTC")
