"""
Resolution of a provider's working windows for a single calendar date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from pendulum import Date, DateTime

from .interval_merger import Interval, merge_intervals
from .models import ProviderSchedule, WorkingHours
from .time_converter import anchor_day, at_minutes, parse_date, to_minutes, weekday_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayPlan:
    """
    Normalized schedule for one date: minute-offset working windows and
    merged breaks, both sorted and pairwise disjoint, plus the local-midnight
    anchor used to turn offsets into instants.
    """
    day: Date
    anchor: DateTime
    windows: Tuple[Interval, ...]
    breaks: Tuple[Interval, ...] = ()

    def instant(self, minutes: int) -> DateTime:
        return at_minutes(self.anchor, minutes)


def plan_day(schedule: ProviderSchedule, date: Any, timezone: str) -> Optional[DayPlan]:
    """
    Build the day plan, or None when the provider has no usable window.

    A custom schedule entry for the date replaces the weekly hours entirely.
    """
    day = parse_date(date)
    if day is None:
        logger.debug("Unparseable request date %r", date)
        return None

    try:
        anchor = anchor_day(day, timezone)
    except (ValueError, LookupError) as exc:
        logger.warning("Cannot anchor %s in timezone %r: %s", day, timezone, exc)
        return None

    custom = schedule.custom_hours_for(day.to_date_string())
    entries = custom if custom else _weekly_entries(schedule, day)
    if not entries:
        return None

    windows = merge_intervals(
        bounds for bounds in (_window_bounds(entry) for entry in entries) if bounds
    )
    if not windows:
        return None

    try:
        breaks = merge_intervals(_break_bounds(entries))
    except ValueError as exc:
        logger.warning("Malformed break on %s, treating day as unavailable: %s", day, exc)
        return None

    return DayPlan(day=day, anchor=anchor, windows=tuple(windows), breaks=tuple(breaks))


def _weekly_entries(schedule: ProviderSchedule, day: Date) -> List[WorkingHours]:
    hours = schedule.hours_for(weekday_token(day))
    return [hours] if hours is not None else []


def _window_bounds(hours: WorkingHours) -> Optional[Interval]:
    try:
        start = to_minutes(hours.start)
        end = to_minutes(hours.end)
    except ValueError as exc:
        logger.warning("Ignoring malformed working window %s-%s: %s", hours.start, hours.end, exc)
        return None

    # Windows must close on the same calendar day.
    if end <= start:
        logger.debug("Ignoring window %s-%s that does not close after it opens", hours.start, hours.end)
        return None

    return start, end


def _break_bounds(entries: Iterable[WorkingHours]) -> List[Interval]:
    return [
        (to_minutes(b.start), to_minutes(b.end))
        for entry in entries
        for b in entry.breaks
    ]
