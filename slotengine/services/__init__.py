"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, ScheduleRepositoryProtocol
from .cache import TTLCache
from .context import RequestContext

__all__ = ["AvailabilityService", "RequestContext", "ScheduleRepositoryProtocol", "TTLCache"]
