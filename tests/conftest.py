"""
Shared fixtures: a small salon with one provider and two services.
"""

import copy
import json

import pytest

SAMPLE_DOCUMENT = {
    "providers": [
        {
            "id": "p-1",
            "tenantId": "default",
            "name": "Sarah Johnson",
            "workingHours": {
                "mon": {"start": "09:00", "end": "17:00", "breaks": [{"start": "12:00", "end": "13:00"}]},
                "tue": {"start": "09:00", "end": "17:00", "breaks": []},
                "wed": {"start": "09:00", "end": "17:00", "breaks": []},
                "thu": {"start": "09:00", "end": "17:00", "breaks": []},
                "fri": {"start": "09:00", "end": "17:00", "breaks": []},
                "sat": {"start": "10:00", "end": "14:00", "breaks": []},
                "sun": None,
            },
            "timeOff": [{"start": "2025-12-24T00:00:00Z", "end": "2025-12-27T00:00:00Z"}],
            "customSchedule": {"2025-12-31": [{"start": "10:00", "end": "13:00"}]},
        },
        {
            "id": "p-2",
            "tenantId": "salon-2",
            "name": "Other Salon",
            "workingHours": {"mon": {"start": "08:00", "end": "12:00"}},
        },
    ],
    "services": [
        {
            "id": "svc-1",
            "tenantId": "default",
            "name": "Facial",
            "providerIds": ["p-1"],
            "variants": [
                {"name": "60 min", "durationMin": 60},
                {"name": "90 min", "durationMin": 90, "bufferAfterMin": 15},
            ],
        },
        {
            "id": "svc-yoga",
            "tenantId": "default",
            "name": "Yoga class",
            "providerIds": ["p-1"],
            "variants": [
                {
                    "name": "Standard",
                    "durationMin": 60,
                    "bufferAfterMin": 15,
                    "fixedTimeSlots": ["09:15", "11:30", "14:00", "16:00"],
                }
            ],
        },
        {"id": "svc-2", "tenantId": "salon-2", "providerIds": ["p-2"], "durationMin": 30},
    ],
    "appointments": [
        {
            "id": "a-1",
            "tenantId": "default",
            "providerId": "p-1",
            "start": "2025-12-22T10:00:00Z",
            "end": "2025-12-22T11:00:00Z",
            "status": "confirmed",
        },
        {
            "id": "a-2",
            "tenantId": "default",
            "providerId": "p-1",
            "start": "2025-12-22T14:00:00Z",
            "end": "2025-12-22T15:00:00Z",
            "status": "cancelled",
        },
        {
            "id": "a-3",
            "tenantId": "salon-2",
            "providerId": "p-2",
            "start": "2025-12-22T08:00:00Z",
            "end": "2025-12-22T09:00:00Z",
        },
    ],
}


@pytest.fixture
def sample_document():
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_data_file(tmp_path, sample_document):
    data_file = tmp_path / "schedule.json"
    data_file.write_text(json.dumps(sample_document), encoding="utf-8")
    return data_file
