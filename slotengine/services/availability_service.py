"""
Application services for answering availability queries.

The service coordinates fetching provider, service and booking data via a
repository adapter and delegates the actual slot computation to the
domain-level ``SlotCalculator``. Tenant identity is passed explicitly through
a ``RequestContext`` on every call; the engine itself never sees it.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import pendulum
from pendulum import Date, DateTime

from ..domain.exceptions import NotFoundError
from ..domain.models import Booking, ProviderSchedule, Service, Slot
from ..domain.slot_calculator import Clock, SlotCalculator
from ..domain.time_converter import MINUTES_PER_DAY, anchor_day, now_instant, parse_date, weekday_token
from .cache import TTLCache
from .context import RequestContext

logger = logging.getLogger(__name__)


class ScheduleRepositoryProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    async def get_provider(self, tenant_id: str, provider_id: str) -> Optional[ProviderSchedule]:
        """Return the provider's schedule, or None if unknown."""

    async def get_service(self, tenant_id: str, service_id: str) -> Optional[Service]:
        """Return the service, or None if unknown."""

    async def list_services_for_provider(self, tenant_id: str, provider_id: str) -> List[Service]:
        """Return services the provider offers."""

    async def list_bookings(
        self,
        tenant_id: str,
        provider_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Booking]:
        """Return bookings for the provider overlapping ``[start, end)``."""


class AvailabilityService:
    """
    Orchestrates data retrieval and slot calculation.

    Dependency inversion toward a protocol makes it easy to plug in a real
    storage adapter or the JSON-backed implementation in tests.
    """

    def __init__(
        self,
        repository: ScheduleRepositoryProtocol,
        slot_calculator: SlotCalculator,
        cache: Optional[TTLCache[List[str]]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._repository = repository
        self._slot_calculator = slot_calculator
        self._cache = cache
        self._clock = clock or now_instant

    @property
    def timezone(self) -> str:
        return self._slot_calculator.timezone

    async def find_slots(
        self,
        context: RequestContext,
        *,
        service_id: str,
        date: str,
        variant_name: Optional[str] = None,
        provider_id: Optional[str] = None,
        total_duration_min: Optional[int] = None,
    ) -> List[Dict[str, str]]:
        """
        Compute serialized slots for one service variant on one date.

        When ``provider_id`` is omitted the service's assigned provider is used.

        Raises:
            TenantContextError: If the context carries no tenant
            NotFoundError: If the service, variant or provider is unknown
        """
        tenant_id = context.require_tenant()

        service = await self._repository.get_service(tenant_id, service_id)
        if service is None:
            raise NotFoundError(f"Service not found: {service_id}")

        variant = service.find_variant(variant_name) if variant_name else service.default_variant()
        if variant is None:
            raise NotFoundError(f"Variant not found: {variant_name}")

        target_id = provider_id or self._assigned_provider(service)
        schedule = await self._require_provider(tenant_id, target_id)

        bounds = self._day_bounds(date)
        if bounds is None:
            return []

        bookings = await self._repository.list_bookings(tenant_id, target_id, *bounds)

        slots = self._slot_calculator.compute_time_slots(
            schedule=schedule,
            service=variant,
            date=date,
            bookings=bookings,
            total_duration_min=total_duration_min,
            now=self._clock(),
        )

        return [self._serialize(slot, target_id) for slot in slots]

    async def fully_booked_dates(
        self,
        context: RequestContext,
        *,
        provider_id: str,
        year: int,
        month: int,
    ) -> List[str]:
        """
        Return the ``YYYY-MM-DD`` dates in a month with no bookable slot for
        any of the provider's active services.

        Raises:
            ValueError: If year or month is out of range
            NotFoundError: If the provider is unknown
        """
        tenant_id = context.require_tenant()

        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            raise ValueError("Invalid year or month")

        cache_key = f"{tenant_id}:{provider_id}:{year:04d}-{month:02d}"
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return list(cached)

        schedule = await self._require_provider(tenant_id, provider_id)
        services = [
            s for s in await self._repository.list_services_for_provider(tenant_id, provider_id)
            if s.active
        ]

        first_day = pendulum.date(year, month, 1)
        days = [first_day.add(days=offset) for offset in range(first_day.days_in_month)]

        if not services:
            result = [day.to_date_string() for day in days]
        else:
            bookings = await self._repository.list_bookings(
                tenant_id,
                provider_id,
                anchor_day(first_day, self.timezone),
                self._day_end(days[-1]),
            )
            now = pendulum.instance(self._clock())
            today = now.in_timezone(self.timezone).date()

            result = [
                day.to_date_string()
                for day in days
                if self._is_fully_booked(schedule, services, day, bookings, today, now)
            ]

        if self._cache is not None:
            self._cache.set(cache_key, result)

        logger.debug("%d fully booked dates for %s in %s", len(result), provider_id, cache_key)
        return list(result)

    def invalidate_provider(self, context: RequestContext, provider_id: str) -> int:
        """Forget cached month results for a provider after its bookings change."""
        tenant_id = context.require_tenant()
        if self._cache is None:
            return 0
        return self._cache.invalidate_prefix(f"{tenant_id}:{provider_id}:")

    def _is_fully_booked(
        self,
        schedule: ProviderSchedule,
        services: Sequence[Service],
        day: Date,
        bookings: Sequence[Booking],
        today: Date,
        now: DateTime,
    ) -> bool:
        if day < today:
            return True

        date_string = day.to_date_string()
        if not schedule.works_on(weekday_token(day), date_string):
            return True

        for service in services:
            slots = self._slot_calculator.compute_time_slots(
                schedule=schedule,
                service=service,
                date=date_string,
                bookings=bookings,
                now=now,
            )
            if slots:
                return False

        return True

    async def _require_provider(self, tenant_id: str, provider_id: str) -> ProviderSchedule:
        schedule = await self._repository.get_provider(tenant_id, provider_id)
        if schedule is None:
            raise NotFoundError(f"Provider not found: {provider_id}")
        return schedule

    @staticmethod
    def _assigned_provider(service: Service) -> str:
        if not service.provider_ids:
            raise NotFoundError(f"Service has no assigned provider: {service.service_id}")
        return service.provider_ids[0]

    def _day_bounds(self, date: str) -> Optional[Tuple[DateTime, DateTime]]:
        day = parse_date(date)
        if day is None:
            return None
        return anchor_day(day, self.timezone), self._day_end(day)

    def _day_end(self, day: Date) -> DateTime:
        # Slots are placed at absolute minute offsets from local midnight, so on
        # a short DST day they can run past the next local midnight.
        return anchor_day(day, self.timezone).add(minutes=MINUTES_PER_DAY)

    def _serialize(self, slot: Slot, provider_id: str) -> Dict[str, str]:
        payload = slot.to_display_dict(self.timezone)
        payload["providerId"] = provider_id
        return payload
