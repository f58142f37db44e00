"""
Slot generation from a fixed list of local start times.

Used for scheduled-class style services (e.g. 09:15, 11:30, 16:00). Each time
is checked with the same conflict rules as the stepped scanner; a time that
does not fit is omitted rather than adjusted.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .conflicts import ConflictCursor
from .day_plan import plan_day
from .exceptions import ScheduleContractError
from .models import Booking, ProviderSchedule, ServiceVariant, Slot
from .time_converter import DEFAULT_TIMEZONE, to_minutes

logger = logging.getLogger(__name__)


def generate_fixed_slots(
    fixed_times: Optional[Sequence[str]],
    schedule: ProviderSchedule,
    variant: Optional[ServiceVariant],
    date: Any,
    bookings: Optional[Iterable[Booking]] = None,
    timezone: str = DEFAULT_TIMEZONE,
) -> List[Slot]:
    """
    Evaluate each fixed ``HH:MM`` start time for ``date``.

    A time is kept only if its whole block lies inside a working window and
    is clear of breaks, time off and non-cancelled bookings. Output is sorted
    ascending with duplicate times collapsed.
    """
    if schedule is None:
        raise ScheduleContractError("A provider schedule is required to compute slots")

    if not fixed_times or variant is None or variant.block_minutes <= 0:
        return []

    plan = plan_day(schedule, date, timezone)
    if plan is None:
        return []

    candidates = sorted(set(_convert_times(fixed_times)))
    block = variant.block_minutes

    breaks = ConflictCursor(plan.breaks)
    time_off = ConflictCursor.from_time_ranges(schedule.time_off)
    taken = ConflictCursor.from_bookings(bookings or [])

    slots: List[Slot] = []

    for window_start, window_end in plan.windows:
        for minute in candidates:
            if minute < window_start or minute > window_end - block:
                continue

            if breaks.blocks(minute, minute + block):
                continue

            slot_start = plan.instant(minute)
            slot_end = plan.instant(minute + block)

            if time_off.blocks(slot_start, slot_end):
                continue
            if taken.blocks(slot_start, slot_end):
                continue

            slots.append(Slot(start=slot_start, end=slot_end))

    return slots


def _convert_times(fixed_times: Iterable[str]) -> List[int]:
    minutes: List[int] = []
    for value in fixed_times:
        try:
            minutes.append(to_minutes(value))
        except ValueError:
            logger.warning("Skipping malformed fixed time %r", value)
    return minutes
