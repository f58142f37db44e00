"""
Domain models for provider schedules, bookings and computed slots.

Models are built from the plain dictionaries exchanged with the rest of the
platform (camelCase keys, ISO-8601 instants) via ``from_dict`` constructors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pendulum
from pendulum import DateTime

from .time_converter import WEEKDAY_TOKENS, parse_instant

logger = logging.getLogger(__name__)

CANCELLED_STATUS = "cancelled"

# Index of ``dayOfWeek`` in list-shaped working hours: 0=Sunday ... 6=Saturday.
_SUNDAY_FIRST_TOKENS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

_EPOCH = pendulum.datetime(1970, 1, 1, tz="UTC")


@dataclass(frozen=True)
class TimeRange:
    """
    Immutable absolute time range ``[start, end)``.

    A range built from unparseable or empty input is marked invalid and never
    overlaps anything. Use ``TimeRange.invalid()`` rather than comparing
    against a half-parsed instant.
    """
    start: DateTime
    end: DateTime
    valid: bool = True

    @classmethod
    def invalid(cls) -> "TimeRange":
        return cls(start=_EPOCH, end=_EPOCH, valid=False)

    @classmethod
    def from_values(cls, start: Any, end: Any) -> "TimeRange":
        """Build a range from raw timestamps, falling back to the invalid sentinel."""
        start_dt = parse_instant(start)
        end_dt = parse_instant(end)

        if start_dt is None or end_dt is None:
            logger.debug("Discarding range with unparseable bounds: %r - %r", start, end)
            return cls.invalid()

        if end_dt <= start_dt:
            logger.debug("Discarding empty or reversed range: %s - %s", start_dt, end_dt)
            return cls.invalid()

        return cls(start=start_dt, end=end_dt)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimeRange":
        if not isinstance(data, Mapping):
            logger.warning("Ignoring time range that is not an object: %r", data)
            return cls.invalid()
        return cls.from_values(data.get("start"), data.get("end"))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, start: DateTime, end: DateTime) -> bool:
        """Half-open overlap test against ``[start, end)``."""
        if not self.valid:
            return False
        return self.start < end and start < self.end

    def __str__(self) -> str:
        if not self.valid:
            return "<invalid range>"
        return f"{self.start.to_iso8601_string()} - {self.end.to_iso8601_string()}"


@dataclass(frozen=True)
class Break:
    """A recurring local break window, as ``HH:MM`` strings."""
    start: str
    end: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Break":
        if not isinstance(data, Mapping):
            # Kept as a malformed break so the day is not offered.
            logger.warning("Break is not an object: %r", data)
            return cls(start="", end="")
        return cls(start=str(data.get("start", "")), end=str(data.get("end", "")))


@dataclass(frozen=True)
class WorkingHours:
    """Local working window for one weekday (or one custom-schedule entry)."""
    start: str
    end: str
    breaks: Tuple[Break, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["WorkingHours"]:
        """Return None when the entry does not describe a working window."""
        if data and not isinstance(data, Mapping):
            logger.warning("Ignoring working hours entry that is not an object: %r", data)
            return None
        if not data or not data.get("start") or not data.get("end"):
            return None
        return cls(
            start=str(data["start"]),
            end=str(data["end"]),
            breaks=tuple(Break.from_dict(b) for b in data.get("breaks") or []),
        )


@dataclass
class ProviderSchedule:
    """
    A service provider's weekly calendar and blackout periods.

    ``working_hours`` maps ``mon``..``sun`` to a window; a missing or None
    entry means the provider does not work that weekday. ``custom_schedule``
    maps ``YYYY-MM-DD`` to windows that replace the weekly hours on that date.
    """
    working_hours: Dict[str, Optional[WorkingHours]] = field(default_factory=dict)
    time_off: List[TimeRange] = field(default_factory=list)
    custom_schedule: Dict[str, List[WorkingHours]] = field(default_factory=dict)
    active: bool = True
    provider_id: str = ""
    name: str = ""

    def hours_for(self, token: str) -> Optional[WorkingHours]:
        return self.working_hours.get(token)

    def custom_hours_for(self, date_string: str) -> List[WorkingHours]:
        return self.custom_schedule.get(date_string, [])

    def works_on(self, token: str, date_string: str) -> bool:
        """Check for either regular weekly hours or a custom schedule entry."""
        return self.hours_for(token) is not None or bool(self.custom_hours_for(date_string))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProviderSchedule":
        custom: Dict[str, List[WorkingHours]] = {}
        raw_custom = data.get("customSchedule") or {}
        if not isinstance(raw_custom, Mapping):
            logger.warning("Ignoring customSchedule that is not an object: %r", raw_custom)
            raw_custom = {}
        for date_string, windows in raw_custom.items():
            parsed = [WorkingHours.from_dict(w) for w in windows or []]
            custom[date_string] = [w for w in parsed if w is not None]

        return cls(
            working_hours=_parse_weekly_hours(data.get("workingHours")),
            time_off=[TimeRange.from_dict(off) for off in data.get("timeOff") or []],
            custom_schedule=custom,
            active=data.get("active", True) is not False,
            provider_id=str(data.get("id") or data.get("_id") or ""),
            name=str(data.get("name", "")),
        )


def _parse_weekly_hours(raw: Any) -> Dict[str, Optional[WorkingHours]]:
    """
    Accept both the ``{mon: {...}}`` mapping and the stored list form
    ``[{dayOfWeek: 1, start, end, breaks}]``.
    """
    if not raw:
        return {}

    if isinstance(raw, Mapping):
        return {
            token: WorkingHours.from_dict(raw.get(token))
            for token in WEEKDAY_TOKENS
            if token in raw
        }

    if not isinstance(raw, list):
        logger.warning("Ignoring working hours that are neither an object nor a list: %r", raw)
        return {}

    hours: Dict[str, Optional[WorkingHours]] = {}
    for entry in raw:
        day = entry.get("dayOfWeek") if isinstance(entry, Mapping) else None
        if not isinstance(day, int) or not 0 <= day <= 6:
            logger.warning("Ignoring working hours entry without a valid dayOfWeek: %r", entry)
            continue
        hours[_SUNDAY_FIRST_TOKENS[day]] = WorkingHours.from_dict(entry)
    return hours


@dataclass(frozen=True)
class ServiceVariant:
    """Bookable variant of a service; its block includes both buffers."""
    duration_min: int
    buffer_before_min: int = 0
    buffer_after_min: int = 0
    fixed_time_slots: Tuple[str, ...] = ()
    name: str = ""

    @property
    def block_minutes(self) -> int:
        return self.duration_min + self.buffer_before_min + self.buffer_after_min

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServiceVariant":
        return cls(
            duration_min=int(data.get("durationMin") or 0),
            buffer_before_min=int(data.get("bufferBeforeMin") or 0),
            buffer_after_min=int(data.get("bufferAfterMin") or 0),
            fixed_time_slots=tuple(data.get("fixedTimeSlots") or ()),
            name=str(data.get("name", "")),
        )


# Applied to services stored without variants.
FALLBACK_VARIANT = ServiceVariant(duration_min=60, buffer_before_min=0, buffer_after_min=10)


@dataclass
class Service:
    """A service offered by one or more providers."""
    service_id: str
    name: str = ""
    variants: List[ServiceVariant] = field(default_factory=list)
    provider_ids: List[str] = field(default_factory=list)
    active: bool = True
    duration_min: Optional[int] = None

    def default_variant(self) -> ServiceVariant:
        """First variant, or a variant derived from the service record itself."""
        if self.variants:
            return self.variants[0]
        if self.duration_min:
            return ServiceVariant(duration_min=self.duration_min, buffer_after_min=10)
        return FALLBACK_VARIANT

    def find_variant(self, name: str) -> Optional[ServiceVariant]:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Service":
        provider_ids: List[str] = []
        for key in ("specialistId", "primaryBeauticianId"):
            if data.get(key):
                provider_ids.append(str(data[key]))
        for key in ("providerIds", "beauticianIds", "additionalBeauticianIds"):
            provider_ids.extend(str(p) for p in data.get(key) or [])

        return cls(
            service_id=str(data.get("id") or data.get("_id") or ""),
            name=str(data.get("name", "")),
            variants=[
                ServiceVariant.from_dict(v) for v in data.get("variants") or [] if isinstance(v, Mapping)
            ],
            provider_ids=list(dict.fromkeys(provider_ids)),
            active=data.get("active", True) is not False,
            duration_min=data.get("durationMin"),
        )


@dataclass(frozen=True)
class Booking:
    """An existing appointment occupying a provider's time."""
    time_range: TimeRange
    status: str = "confirmed"
    provider_id: str = ""

    @property
    def is_blocking(self) -> bool:
        return self.status != CANCELLED_STATUS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Booking":
        return cls(
            time_range=TimeRange.from_dict(data),
            status=str(data.get("status") or "confirmed"),
            provider_id=str(data.get("providerId") or data.get("specialistId") or ""),
        )


@dataclass(frozen=True)
class Slot:
    """
    A computed bookable window. Slots are produced fresh on every call and
    are never persisted.
    """
    start: DateTime
    end: DateTime

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def to_dict(self) -> Dict[str, str]:
        """Serialize as ISO-8601 UTC instants."""
        return {
            "startISO": _utc_iso(self.start),
            "endISO": _utc_iso(self.end),
        }

    def to_display_dict(self, timezone: str) -> Dict[str, str]:
        """Serialized slot plus local ``HH:MM`` start and end times."""
        payload = {
            "startTime": self.start.in_timezone(timezone).format("HH:mm"),
            "endTime": self.end.in_timezone(timezone).format("HH:mm"),
        }
        payload.update(self.to_dict())
        return payload


def _utc_iso(instant: DateTime) -> str:
    return instant.in_timezone("UTC").format("YYYY-MM-DD[T]HH:mm:ss[Z]")
