"""Integration tests: patient CRUD lifecycle."""

from __future__ import annotations

from starlette.testclient import TestClient

from tests.patients._helpers import create_patient


def test_patient_crud_lifecycle_happy_path(client: TestClient) -> None:
    """Create -> Get -> Update -> Delete -> 404."""
    created = create_patient(client=client, name="Ada Lovelace", mrn="MRN-1815")
    patient_id = created["id"]

    get_res = client.get(f"/api/patients/{patient_id}")
    assert get_res.status_code == 200
    assert get_res.json()["id"] == patient_id

    update_res = client.put(f"/api/patients/{patient_id}", json={"name": "Ada King"})
    assert update_res.status_code == 200
    assert update_res.json()["name"] == "Ada King"

    delete_res = client.delete(f"/api/patients/{patient_id}")
    assert delete_res.status_code == 200
    assert delete_res.json() == {"message": "Patient deleted"}

    missing_res = client.get(f"/api/patients/{patient_id}")
    assert missing_res.status_code == 404
    assert missing_res.json()["error"] == "NotFound"


def test_create_then_get_round_trip(client: TestClient) -> None:
    created = create_patient(
        client=client,
        name="Jane Doe",
        mrn="MRN123",
        ot_date="2024-01-01",
        surgeryType="Appendectomy",
        surgeon="Dr. Okafor",
        unit="Ward 4B",
    )

    fetched = client.get(f"/api/patients/{created['id']}").json()

    for field in ("id", "name", "mrn", "surgeryType", "otDate", "surgeon", "unit"):
        assert fetched[field] == created[field]
    assert fetched["createdAt"] == created["createdAt"]
    assert fetched["updatedAt"] == created["updatedAt"]
    assert fetched["pod"] == created["pod"]


def test_delete_twice_returns_not_found(client: TestClient) -> None:
    patient_id = create_patient(client=client)["id"]

    assert client.delete(f"/api/patients/{patient_id}").status_code == 200
    second = client.delete(f"/api/patients/{patient_id}")
    assert second.status_code == 404
    assert second.json() == {"error": "NotFound", "detail": "Patient not found"}


def test_unknown_and_malformed_ids_are_not_found(client: TestClient) -> None:
    for patient_id in ("00000000-0000-0000-0000-000000000000", "not-a-uuid"):
        assert client.get(f"/api/patients/{patient_id}").status_code == 404
        assert client.put(f"/api/patients/{patient_id}", json={"name": "x"}).status_code == 404
        assert client.delete(f"/api/patients/{patient_id}").status_code == 404
