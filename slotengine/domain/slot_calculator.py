"""
Core business logic for calculating bookable slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). The only
non-deterministic input, the current instant, comes from an injectable clock
and is read at most once per call.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Union

from pendulum import DateTime

from .fixed_slots import generate_fixed_slots
from .models import Booking, ProviderSchedule, Service, ServiceVariant, Slot, TimeRange
from .scanner import DEFAULT_STEP_MIN, scan_day
from .time_converter import DEFAULT_TIMEZONE, now_instant
from .today_clamp import clamp_to_now

logger = logging.getLogger(__name__)

Clock = Callable[[], DateTime]


class SlotCalculator:
    """
    Calculates bookable slots for a provider, a service variant and a date.

    Pipeline:
    1. Resolve the provider's working windows and breaks for the date
    2. Sort time off and bookings once
    3. Sweep candidate start times (stepped or fixed) with monotonic cursors
    4. Drop already-started slots when the date is today
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        step_min: int = DEFAULT_STEP_MIN,
        clock: Optional[Clock] = None,
    ):
        self.timezone = timezone
        self.step_min = step_min
        self._clock = clock or now_instant

    def compute_slots(
        self,
        schedule: ProviderSchedule,
        variant: Optional[ServiceVariant],
        date: Any,
        bookings: Optional[Iterable[Booking]] = None,
        step_min: Optional[int] = None,
    ) -> List[Slot]:
        """Stepped scan only; a pure function of its arguments."""
        return scan_day(
            schedule,
            variant,
            date,
            bookings=bookings,
            timezone=self.timezone,
            step_min=self.step_min if step_min is None else step_min,
        )

    def compute_fixed_slots(
        self,
        schedule: ProviderSchedule,
        variant: Optional[ServiceVariant],
        date: Any,
        bookings: Optional[Iterable[Booking]] = None,
        fixed_times: Optional[List[str]] = None,
    ) -> List[Slot]:
        """Evaluate fixed start times; defaults to the variant's own list."""
        if fixed_times is None and variant is not None:
            fixed_times = list(variant.fixed_time_slots)

        return generate_fixed_slots(
            fixed_times,
            schedule,
            variant,
            date,
            bookings=bookings,
            timezone=self.timezone,
        )

    def compute_time_slots(
        self,
        *,
        schedule: ProviderSchedule,
        service: Union[Service, ServiceVariant, None],
        date: Any,
        bookings: Optional[Iterable[Booking]] = None,
        extra_blackouts: Optional[Iterable[TimeRange]] = None,
        total_duration_min: Optional[int] = None,
        step_min: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[Slot]:
        """
        Full slot planning for a booking request.

        Args:
            schedule: Provider calendar
            service: A service (its first variant is used) or a variant
            date: Requested calendar date
            bookings: Existing appointments
            extra_blackouts: Additional ranges that always block
            total_duration_min: Replaces the variant's duration (multi-service booking)
            step_min: Overrides the configured step
            now: Current instant; read from the clock when omitted

        Returns:
            Slots sorted ascending by start.
        """
        if schedule is not None and not schedule.active:
            logger.debug("Provider %s is inactive", schedule.provider_id)
            return []

        variant = self._resolve_variant(service)
        if variant is None:
            return []

        if total_duration_min is not None:
            variant = dataclasses.replace(variant, duration_min=total_duration_min)

        occupied = list(bookings or [])
        occupied.extend(Booking(time_range=r) for r in extra_blackouts or [])

        if variant.fixed_time_slots:
            slots = self.compute_fixed_slots(schedule, variant, date, bookings=occupied)
        else:
            slots = self.compute_slots(schedule, variant, date, bookings=occupied, step_min=step_min)

        current = now if now is not None else self._clock()
        return clamp_to_now(slots, date, self.timezone, current)

    @staticmethod
    def _resolve_variant(
        service: Union[Service, ServiceVariant, None],
    ) -> Optional[ServiceVariant]:
        if isinstance(service, Service):
            return service.default_variant()
        return service
