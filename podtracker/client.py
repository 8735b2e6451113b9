"""HTTP client for the POD tracker REST API (used by the UI)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_TIMEOUT_SECONDS = 10.0
PATIENTS_PATH = "/api/patients"


class PatientApiError(Exception):
    """Raised for any failed API call.

    ``status_code`` is None when the server could not be reached at all. ``message``
    is the server-provided ``detail`` when there is one, suitable for showing to users.
    """

    def __init__(self, message: str, *, status_code: int | None = None, error: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class PatientRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str
    mrn: str
    surgery_type: str = ""
    ot_date: date
    surgeon: str = ""
    unit: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    pod: int = 0


def _to_wire(fields: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for name, value in fields.items():
        if isinstance(value, date):
            value = value.isoformat()
        body[to_camel(name)] = value
    return body


class PatientApiClient:
    """Synchronous client for the five patient endpoints plus the health check.

    Pass ``http_client`` to reuse an existing ``httpx.Client`` (its base URL is used
    as-is); otherwise one is created for ``base_url`` and closed by :meth:`close`.
    """

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:4000",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    def __enter__(self) -> PatientApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            resp = self._client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise PatientApiError("The POD tracker API timed out") from exc
        except httpx.HTTPError as exc:
            raise PatientApiError("Could not reach the POD tracker API") from exc

        if resp.is_error:
            error: str | None = None
            try:
                body = resp.json()
                message = str(body.get("detail") or body.get("message") or resp.reason_phrase)
                error = body.get("error")
            except (ValueError, AttributeError):
                message = resp.text or resp.reason_phrase
            raise PatientApiError(message, status_code=resp.status_code, error=error)

        return resp.json()

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/")

    def list_patients(self) -> list[PatientRecord]:
        data = self._request("GET", PATIENTS_PATH)
        return [PatientRecord.model_validate(item) for item in data]

    def get_patient(self, patient_id: str) -> PatientRecord:
        return PatientRecord.model_validate(self._request("GET", f"{PATIENTS_PATH}/{patient_id}"))

    def create_patient(
        self,
        *,
        name: str,
        mrn: str,
        ot_date: date | str,
        surgery_type: str = "",
        surgeon: str = "",
        unit: str = "",
    ) -> PatientRecord:
        body = _to_wire(
            {
                "name": name,
                "mrn": mrn,
                "surgery_type": surgery_type,
                "ot_date": ot_date,
                "surgeon": surgeon,
                "unit": unit,
            }
        )
        return PatientRecord.model_validate(self._request("POST", PATIENTS_PATH, json=body))

    def update_patient(self, patient_id: str, **fields: Any) -> PatientRecord:
        """Send only the given fields (snake_case names, e.g. ``surgery_type``)."""
        data = self._request("PUT", f"{PATIENTS_PATH}/{patient_id}", json=_to_wire(fields))
        return PatientRecord.model_validate(data)

    def delete_patient(self, patient_id: str) -> str:
        data = self._request("DELETE", f"{PATIENTS_PATH}/{patient_id}")
        return str(data.get("message", ""))
