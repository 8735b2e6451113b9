"""Integration tests: listing patients."""

from __future__ import annotations

from starlette.testclient import TestClient

from tests.patients._helpers import create_patient, list_patients


def test_list_empty_is_ok(client: TestClient) -> None:
    assert list_patients(client=client) == []


def test_list_returns_all_newest_first(client: TestClient) -> None:
    created_ids = [create_patient(client=client, name=f"Patient {i}")["id"] for i in range(4)]

    items = list_patients(client=client)

    assert [p["id"] for p in items] == list(reversed(created_ids))
    created_at = [p["createdAt"] for p in items]
    assert created_at == sorted(created_at, reverse=True)


def test_list_attaches_pod_to_every_item(client: TestClient, frozen_now) -> None:
    create_patient(client=client, ot_date="2024-01-06")
    create_patient(client=client, ot_date="2024-01-07")
    create_patient(client=client, ot_date="2024-01-01")

    pods = [p["pod"] for p in list_patients(client=client)]

    assert pods == [5, -1, 0]


def test_pod_is_recomputed_on_each_fetch(client: TestClient, frozen_now) -> None:
    from datetime import UTC, datetime

    patient_id = create_patient(client=client, ot_date="2024-01-01")["id"]
    assert client.get(f"/api/patients/{patient_id}").json()["pod"] == 5

    frozen_now(datetime(2024, 1, 8, 0, 5, tzinfo=UTC))

    assert client.get(f"/api/patients/{patient_id}").json()["pod"] == 7
    assert list_patients(client=client)[0]["pod"] == 7
