"""Integration tests: patient creation and required fields."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from tests.patients._helpers import create_patient, list_patients


@pytest.mark.parametrize(
    "payload",
    [
        {"mrn": "MRN123", "otDate": "2024-01-01"},
        {"name": "Jane Doe", "otDate": "2024-01-01"},
        {"name": "Jane Doe", "mrn": "MRN123"},
        {"name": "   ", "mrn": "MRN123", "otDate": "2024-01-01"},
        {"name": "Jane Doe", "mrn": "", "otDate": "2024-01-01"},
        {"name": "Jane Doe", "mrn": "MRN123", "otDate": ""},
        {"name": "Jane Doe", "mrn": "MRN123", "otDate": None},
        {},
    ],
)
def test_create_missing_required_field_returns_400_without_writing(
    client: TestClient, payload: dict
) -> None:
    res = client.post("/api/patients", json=payload)

    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "MissingRequiredField"
    assert body["detail"] == "name, mrn, and otDate are required"
    assert list_patients(client=client) == []


def test_missing_fields_are_reported_by_wire_name(client: TestClient) -> None:
    res = client.post("/api/patients", json={"name": "Jane Doe"})

    assert res.status_code == 400
    assert res.json()["fields"] == ["mrn", "otDate"]


def test_create_returns_pod_for_frozen_today(client: TestClient, frozen_now) -> None:
    # "today" is 2024-01-06
    created = create_patient(client=client, name="Jane Doe", mrn="MRN123", ot_date="2024-01-01")

    assert created["pod"] == 5
    assert created["otDate"] == "2024-01-01"


def test_create_defaults_and_trims_text_fields(client: TestClient) -> None:
    created = create_patient(client=client, name="  Jane Doe ", mrn=" MRN123", surgeon="  ")

    assert created["name"] == "Jane Doe"
    assert created["mrn"] == "MRN123"
    assert created["surgeryType"] == ""
    assert created["surgeon"] == ""
    assert created["unit"] == ""
    assert created["id"]
    assert created["createdAt"]
    assert created["updatedAt"]


def test_create_accepts_iso_datetime_ot_date(client: TestClient) -> None:
    created = create_patient(client=client, ot_date="2024-01-01T22:30:00.000Z")

    assert created["otDate"] == "2024-01-01"


def test_create_rejects_unparseable_ot_date(client: TestClient) -> None:
    res = client.post(
        "/api/patients", json={"name": "Jane Doe", "mrn": "MRN123", "otDate": "next tuesday"}
    )

    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "InvalidRequest"
    assert body["errors"][0]["field"] == "otDate"
    assert list_patients(client=client) == []


def test_create_ignores_client_supplied_pod_and_id(client: TestClient, frozen_now) -> None:
    created = create_patient(client=client, ot_date="2024-01-05", pod=99, id="abc")

    assert created["pod"] == 1
    assert created["id"] != "abc"


def test_mrn_is_not_unique(client: TestClient) -> None:
    first = create_patient(client=client, mrn="MRN123")
    second = create_patient(client=client, mrn="MRN123")

    assert first["id"] != second["id"]
    assert len(list_patients(client=client)) == 2
