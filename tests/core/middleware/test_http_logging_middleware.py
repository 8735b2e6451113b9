"""Unit tests for the HTTP logging middleware.

We assert structured log fields via `caplog` (not message strings).
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from podtracker.core.middleware.http_logging import HttpLoggingMiddleware


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(HttpLoggingMiddleware)

    @app.get("/api/patients/{patient_id}")
    async def get_patient(patient_id: str) -> dict[str, str]:
        return {"id": patient_id}

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    return app


def _http_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "podtracker.http"]


def test_logs_route_template_not_raw_path(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="podtracker.http")

    with TestClient(_make_app()) as client:
        res = client.get("/api/patients/0b5e7c1e?name=Jane+Doe")

    assert res.status_code == 200
    records = [r for r in _http_records(caplog) if r.levelno == logging.INFO]
    assert len(records) == 1
    record = records[0]
    assert record.__dict__["request_path"] == "/api/patients/{patient_id}"
    assert record.__dict__["http_method"] == "GET"
    assert record.__dict__["status_code"] == 200
    assert record.__dict__["request_id"] == res.headers["x-request-id"]
    assert record.__dict__["duration_ms"] >= 0


def test_propagates_valid_request_id_and_replaces_unsafe_one(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="podtracker.http")

    with TestClient(_make_app()) as client:
        kept = client.get("/api/patients/1", headers={"X-Request-ID": "req_abc-123"})
        replaced = client.get("/api/patients/1", headers={"X-Request-ID": "bad id with spaces"})

    assert kept.headers["x-request-id"] == "req_abc-123"
    assert replaced.headers["x-request-id"] != "bad id with spaces"
    assert len(replaced.headers["x-request-id"]) == 32


def test_uses_aws_request_id_when_behind_serverless_adapter() -> None:
    from starlette.requests import Request

    from podtracker.core.middleware.http_logging import resolve_request_id

    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [],
        "aws.context": SimpleNamespace(aws_request_id="c6af9ac6-7b61-11e6-9a41-93e8deadbeef"),
    }

    assert resolve_request_id(Request(scope)) == "c6af9ac6-7b61-11e6-9a41-93e8deadbeef"


def test_unhandled_exception_logs_error_with_stack_trace(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="podtracker.http")

    with TestClient(_make_app(), raise_server_exceptions=False) as client:
        res = client.get("/boom", headers={"X-Request-ID": "req_err_001"})

    assert res.status_code == 500
    errors = [r for r in _http_records(caplog) if r.levelno == logging.ERROR]
    assert len(errors) == 1
    record = errors[0]
    assert record.__dict__["request_id"] == "req_err_001"
    assert record.__dict__["request_path"] == "/boom"
    assert record.__dict__["status_code"] == 500
    assert record.exc_info
