"""Integration tests: unmatched routes and server-side failures."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from podtracker.core.settings import get_settings
from podtracker.domain.exceptions import DatabaseConnectionError, PatientStoreError
from podtracker.main import create_app
from podtracker.patients import service

EXPECTED_ROUTES = {
    "GET /",
    "GET /api/patients",
    "POST /api/patients",
    "GET /api/patients/{patient_id}",
    "PUT /api/patients/{patient_id}",
    "DELETE /api/patients/{patient_id}",
}


def test_unmatched_route_lists_available_routes(client: TestClient) -> None:
    res = client.get("/api/doctors")

    assert res.status_code == 404
    body = res.json()
    assert body["error"] == "Not Found"
    assert body["detail"] == "Route GET /api/doctors not found"
    assert set(body["availableRoutes"]) == EXPECTED_ROUTES


def test_unsupported_method_is_reported_as_unmatched(client: TestClient) -> None:
    res = client.patch("/api/patients")

    assert res.status_code == 404
    assert "availableRoutes" in res.json()


async def _failing_list(**_kwargs):
    raise PatientStoreError("Failed to fetch patients") from RuntimeError("disk I/O error")


@pytest.fixture
def failing_client(monkeypatch: pytest.MonkeyPatch):
    def build():
        monkeypatch.setattr(service, "handle_list", _failing_list)
        app = create_app()
        return TestClient(app, raise_server_exceptions=False)

    return build


def test_store_failure_is_sanitized_in_production(failing_client) -> None:
    with failing_client() as client:
        res = client.get("/api/patients")

    assert res.status_code == 500
    assert res.json() == {
        "error": "InternalFailure",
        "detail": "An error occurred processing your request",
    }


def test_store_failure_includes_detail_in_development(
    failing_client, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()

    with failing_client() as client:
        res = client.get("/api/patients")

    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to fetch patients: disk I/O error"


def _boom_app() -> TestClient:
    app = create_app()

    @app.get("/boom", include_in_schema=False)
    async def boom() -> None:
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


def test_unexpected_exception_returns_generic_500() -> None:
    with _boom_app() as client:
        res = client.get("/boom")

    assert res.status_code == 500
    assert res.json() == {
        "error": "Internal Server Error",
        "detail": "An error occurred processing your request",
    }


def test_unexpected_exception_detail_in_development(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "development")
    get_settings.cache_clear()

    with _boom_app() as client:
        res = client.get("/boom")

    assert res.status_code == 500
    assert res.json()["detail"] == "kaboom"


def test_malformed_json_body_is_a_client_error(client: TestClient) -> None:
    res = client.post(
        "/api/patients", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert res.status_code == 400
    assert res.json()["error"] == "InvalidRequest"


async def _unreachable_list(**_kwargs):
    raise DatabaseConnectionError("Database is unreachable")


def test_unreachable_database_is_a_server_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    with TestClient(create_app(), raise_server_exceptions=False) as client:
        monkeypatch.setattr(service, "handle_list", _unreachable_list)
        res = client.get("/api/patients")

    assert res.status_code == 500
    assert res.json() == {"error": "ConnectionFailure", "detail": "Database unavailable"}


def test_unexpected_exception_response_carries_cors_headers() -> None:
    with _boom_app() as client:
        res = client.get("/boom", headers={"Origin": "https://pod.example.org"})

    assert res.status_code == 500
    assert res.headers["access-control-allow-origin"] == "*"
    assert res.json()["error"] == "Internal Server Error"
