"""
Sweep-line availability scanner.

Candidate start times are stepped uniformly across each working window and
classified against merged breaks, time-off ranges and bookings. Each conflict
source is sorted once and consumed through its own forward-only cursor, so a
scan costs O(n log n) for the sort plus a single linear pass, regardless of
the step size.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .conflicts import ConflictCursor
from .day_plan import plan_day
from .exceptions import ScheduleContractError
from .models import Booking, ProviderSchedule, ServiceVariant, Slot
from .time_converter import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

DEFAULT_STEP_MIN = 15


def scan_day(
    schedule: ProviderSchedule,
    variant: Optional[ServiceVariant],
    date: Any,
    bookings: Optional[Iterable[Booking]] = None,
    timezone: str = DEFAULT_TIMEZONE,
    step_min: int = DEFAULT_STEP_MIN,
) -> List[Slot]:
    """
    Compute bookable slots for ``variant`` on ``date``.

    Args:
        schedule: Provider calendar (weekly hours, custom days, time off)
        variant: Service variant; its block includes both buffers
        date: Requested calendar date (``YYYY-MM-DD`` or date)
        bookings: Existing appointments; cancelled ones are ignored
        timezone: IANA timezone the working hours are expressed in
        step_min: Granularity of candidate start times

    Returns:
        Slots sorted ascending by start; empty when nothing fits.

    Raises:
        ScheduleContractError: If no provider schedule is given
    """
    if schedule is None:
        raise ScheduleContractError("A provider schedule is required to compute slots")

    if variant is None or step_min <= 0 or variant.block_minutes <= 0:
        logger.debug("No scan: variant=%r step_min=%r", variant, step_min)
        return []

    plan = plan_day(schedule, date, timezone)
    if plan is None:
        return []

    block = variant.block_minutes
    breaks = ConflictCursor(plan.breaks)
    time_off = ConflictCursor.from_time_ranges(schedule.time_off)
    taken = ConflictCursor.from_bookings(bookings or [])

    slots: List[Slot] = []

    for window_start, window_end in plan.windows:
        if window_start + block > window_end:
            continue

        for minute in range(window_start, window_end - block + 1, step_min):
            # A blocked candidate still advances by one step so results stay
            # fine-grained next to a conflict boundary.
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
