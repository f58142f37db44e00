"""
Tests for the JSON-backed schedule repository.
"""

import asyncio

import pendulum
import pytest

from slotengine.adapters.json_repository import JsonScheduleRepository
from slotengine.domain.exceptions import ScheduleDataError

DAY_START = pendulum.datetime(2025, 12, 22, tz="UTC")
DAY_END = DAY_START.add(days=1)


def test_get_provider(sample_document):
    repository = JsonScheduleRepository(sample_document)

    schedule = asyncio.run(repository.get_provider("default", "p-1"))

    assert schedule.provider_id == "p-1"
    assert schedule.hours_for("sat").start == "10:00"
    assert schedule.hours_for("sun") is None
    assert len(schedule.time_off) == 1


def test_records_are_scoped_to_their_tenant(sample_document):
    repository = JsonScheduleRepository(sample_document)

    assert asyncio.run(repository.get_provider("salon-2", "p-1")) is None
    assert asyncio.run(repository.get_service("default", "svc-2")) is None
    assert [p.provider_id for p in asyncio.run(repository.list_providers("salon-2"))] == ["p-2"]


def test_records_without_tenant_belong_to_default():
    repository = JsonScheduleRepository({"providers": [{"id": "p-9", "workingHours": {}}]})

    assert asyncio.run(repository.get_provider("default", "p-9")) is not None


def test_list_services_for_provider(sample_document):
    repository = JsonScheduleRepository(sample_document)

    services = asyncio.run(repository.list_services_for_provider("default", "p-1"))

    assert [s.service_id for s in services] == ["svc-1", "svc-yoga"]
    assert asyncio.run(repository.list_services_for_provider("default", "p-2")) == []


def test_list_bookings_filters_by_provider_and_range(sample_document):
    repository = JsonScheduleRepository(sample_document)

    bookings = asyncio.run(repository.list_bookings("default", "p-1", DAY_START, DAY_END))

    assert [b.status for b in bookings] == ["confirmed", "cancelled"]
    assert asyncio.run(
        repository.list_bookings("default", "p-1", DAY_END, DAY_END.add(days=1))
    ) == []


def test_invalid_bookings_are_kept(sample_document):
    sample_document["appointments"].append(
        {"id": "bad", "providerId": "p-1", "start": "not-a-date", "end": "2025-12-22T11:00:00Z"}
    )
    repository = JsonScheduleRepository(sample_document)

    bookings = asyncio.run(repository.list_bookings("default", "p-1", DAY_END, DAY_END.add(days=1)))

    assert len(bookings) == 1
    assert not bookings[0].time_range.valid


def test_from_file(sample_data_file):
    repository = JsonScheduleRepository.from_file(sample_data_file)

    assert asyncio.run(repository.get_service("default", "svc-1")).name == "Facial"


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonScheduleRepository.from_file(tmp_path / "missing.json")


def test_from_file_invalid_json(tmp_path):
    data_file = tmp_path / "broken.json"
    data_file.write_text("{not json", encoding="utf-8")

    with pytest.raises(ScheduleDataError):
        JsonScheduleRepository.from_file(data_file)


def test_from_file_requires_object_root(tmp_path):
    data_file = tmp_path / "list.json"
    data_file.write_text("[]", encoding="utf-8")

    with pytest.raises(ScheduleDataError):
        JsonScheduleRepository.from_file(data_file)


def test_sections_must_be_lists():
    with pytest.raises(ScheduleDataError):
        JsonScheduleRepository({"providers": {"id": "p-1"}})
