"""
Removal of slots that have already started when the request is for today.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Sequence

import pendulum

from .models import Slot
from .time_converter import parse_date


def clamp_to_now(
    slots: Sequence[Slot],
    date: Any,
    timezone: str,
    now: datetime,
) -> List[Slot]:
    """
    Drop slots whose start is not strictly after ``now``.

    Applies only when ``date`` is today's calendar date in ``timezone``;
    otherwise the slots are returned unchanged. ``now`` is passed in so the
    clamp boundary is read once per request.
    """
    if not slots:
        return []

    day = parse_date(date)
    current = pendulum.instance(now)

    if day is None or current.in_timezone(timezone).date() != day:
        return list(slots)

    return [slot for slot in slots if slot.start > current]
