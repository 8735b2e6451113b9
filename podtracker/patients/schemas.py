from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _parse_ot_date(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` or a full ISO-8601 datetime; blanks become ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if len(value) > 10:
            # Keep the calendar day as written by the client; "Z" is accepted on 3.11+.
            return datetime.fromisoformat(value).date()
    return value


class _PatientPayload(BaseModel):
    # Required-field checks happen in the service so a missing field maps to a 400
    # MissingRequiredField instead of a schema error; every field is nullable here.
    model_config = ConfigDict(**_WIRE_CONFIG, extra="ignore")

    name: str | None = Field(default=None, max_length=255, examples=["Jane Doe"])
    mrn: str | None = Field(
        default=None,
        max_length=64,
        description="Medical Record Number (free text, not unique).",
        examples=["MRN123"],
    )
    surgery_type: str | None = Field(
        default=None, max_length=255, examples=["Laparoscopic cholecystectomy"]
    )
    ot_date: date | None = Field(
        default=None,
        description="Operative date (YYYY-MM-DD or ISO-8601 datetime).",
        examples=["2024-01-01"],
    )
    surgeon: str | None = Field(default=None, max_length=255, examples=["Dr. Smith"])
    unit: str | None = Field(default=None, max_length=255, examples=["Ward 4B"])

    @field_validator("ot_date", mode="before")
    @classmethod
    def _coerce_ot_date(cls, value: Any) -> Any:
        return _parse_ot_date(value)

    def provided_fields(self) -> dict[str, Any]:
        """Fields actually present in the request body, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class PatientCreate(_PatientPayload):
    """Create payload. ``name``, ``mrn`` and ``otDate`` are required."""


class PatientUpdate(_PatientPayload):
    """Partial update payload; omitted fields are left unchanged.

    Server-managed fields (``id``, ``pod``, ``createdAt``, ``updatedAt``) are ignored.
    """


class PatientOut(BaseModel):
    model_config = _WIRE_CONFIG

    id: uuid.UUID = Field(description="Patient identifier (UUID).")
    name: str = Field(description="Patient name.")
    mrn: str = Field(description="Medical Record Number (MRN).")
    surgery_type: str = Field(description="Surgery performed (may be empty).")
    ot_date: date = Field(description="Operative date (YYYY-MM-DD).")
    surgeon: str = Field(description="Operating surgeon (may be empty).")
    unit: str = Field(description="Ward or unit (may be empty).")
    created_at: datetime = Field(description="Record creation timestamp (UTC).")
    updated_at: datetime = Field(description="Record last update timestamp (UTC).")
    pod: int = Field(
        description="Post-operative day: whole days since otDate (negative if in the future)."
    )


class PatientDeletedOut(BaseModel):
    message: str = Field(examples=["Patient deleted"])
