"""
Domain-specific exception hierarchy for the slot engine.
"""


class SlotEngineError(Exception):
    """Base class for all application-level errors."""


class ScheduleContractError(SlotEngineError):
    """Raised when a caller breaks a programmer-facing contract (e.g. no provider)."""


class TenantContextError(SlotEngineError):
    """Raised when a service call is made without a tenant context."""


class NotFoundError(SlotEngineError):
    """Raised when a provider, service or variant cannot be resolved."""


class ScheduleDataError(SlotEngineError):
    """Raised when schedule data cannot be loaded or has the wrong shape."""
