"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    NotFoundError,
    ScheduleContractError,
    ScheduleDataError,
    SlotEngineError,
    TenantContextError,
)
from .fixed_slots import generate_fixed_slots
from .interval_merger import merge_intervals
from .models import (
    Booking,
    Break,
    ProviderSchedule,
    Service,
    ServiceVariant,
    Slot,
    TimeRange,
    WorkingHours,
)
from .scanner import scan_day
from .slot_calculator import SlotCalculator
from .today_clamp import clamp_to_now

__all__ = [
    "Booking",
    "Break",
    "NotFoundError",
    "ProviderSchedule",
    "ScheduleContractError",
    "ScheduleDataError",
    "Service",
    "ServiceVariant",
    "Slot",
    "SlotCalculator",
    "SlotEngineError",
    "TenantContextError",
    "TimeRange",
    "WorkingHours",
    "clamp_to_now",
    "generate_fixed_slots",
    "merge_intervals",
    "scan_day",
]
