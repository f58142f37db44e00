"""
Schedule repository backed by a JSON document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pendulum import DateTime

from ..domain.exceptions import ScheduleDataError
from ..domain.models import Booking, ProviderSchedule, Service

logger = logging.getLogger(__name__)

DEFAULT_TENANT = "default"


class JsonScheduleRepository:
    """
    Repository that serves providers, services and appointments from JSON.

    Expected shape::

        {
            "providers": [{"id": "...", "tenantId": "...", "workingHours": {...}, "timeOff": [...]}],
            "services": [{"id": "...", "tenantId": "...", "providerIds": [...], "variants": [...]}],
            "appointments": [{"providerId": "...", "tenantId": "...", "start": "...", "end": "...", "status": "..."}]
        }

    Records without ``tenantId`` belong to the ``default`` tenant. Useful for
    the CLI and for tests, without requiring a database.
    """

    def __init__(self, document: Mapping[str, Any]):
        """
        Initialize the repository.

        Args:
            document: Parsed JSON document

        Raises:
            ScheduleDataError: If the top-level sections are not lists
        """
        self._providers = self._section(document, "providers")
        self._services = self._section(document, "services")
        self._appointments = self._section(document, "appointments")

    @classmethod
    def from_file(cls, data_file: Path) -> "JsonScheduleRepository":
        """Load the repository from a JSON file."""
        if not data_file.exists():
            raise FileNotFoundError(f"Schedule data file not found: {data_file}")

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise ScheduleDataError(f"Invalid JSON in {data_file}: {exc}") from exc

        if not isinstance(document, dict):
            raise ScheduleDataError("Schedule data must contain an object at the root level.")

        return cls(document)

    @staticmethod
    def _section(document: Mapping[str, Any], key: str) -> List[Dict[str, Any]]:
        section = document.get(key) or []
        if not isinstance(section, list):
            raise ScheduleDataError(f"'{key}' must be a list")
        return [record for record in section if isinstance(record, dict)]

    @staticmethod
    def _owned_by(record: Mapping[str, Any], tenant_id: str) -> bool:
        return str(record.get("tenantId") or DEFAULT_TENANT) == tenant_id

    @staticmethod
    def _record_id(record: Mapping[str, Any]) -> str:
        return str(record.get("id") or record.get("_id") or "")

    async def get_provider(self, tenant_id: str, provider_id: str) -> Optional[ProviderSchedule]:
        for record in self._providers:
            if self._owned_by(record, tenant_id) and self._record_id(record) == provider_id:
                return ProviderSchedule.from_dict(record)
        return None

    async def get_service(self, tenant_id: str, service_id: str) -> Optional[Service]:
        for record in self._services:
            if self._owned_by(record, tenant_id) and self._record_id(record) == service_id:
                return Service.from_dict(record)
        return None

    async def list_services_for_provider(self, tenant_id: str, provider_id: str) -> List[Service]:
        services = [
            Service.from_dict(record)
            for record in self._services
            if self._owned_by(record, tenant_id)
        ]
        return [service for service in services if provider_id in service.provider_ids]

    async def list_providers(self, tenant_id: str) -> List[ProviderSchedule]:
        return [
            ProviderSchedule.from_dict(record)
            for record in self._providers
            if self._owned_by(record, tenant_id)
        ]

    async def list_bookings(
        self,
        tenant_id: str,
        provider_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[Booking]:
        """
        Return the provider's bookings overlapping ``[start, end)``.

        Bookings with unparseable timestamps are kept; the engine treats
        them as never overlapping.
        """
        bookings: List[Booking] = []

        for record in self._appointments:
            if not self._owned_by(record, tenant_id):
                continue

            booking = Booking.from_dict(record)
            if booking.provider_id != provider_id:
                continue

            if not booking.time_range.valid:
                logger.warning(
                    "Appointment %s has invalid timestamps (%r - %r)",
                    self._record_id(record) or "<unknown>",
                    record.get("start"),
                    record.get("end"),
                )
                bookings.append(booking)
                continue

            if booking.time_range.overlaps(start, end):
                bookings.append(booking)

        return bookings
