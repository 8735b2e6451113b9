"""Explicit constraint checks for patient payloads.

Checks run before anything reaches the database so a rejected request never causes
a partial write. Input keys are the Python attribute names (``ot_date``, not
``otDate``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from podtracker.domain.exceptions import MissingRequiredFieldError

REQUIRED_FIELDS: tuple[str, ...] = ("name", "mrn", "ot_date")
OPTIONAL_TEXT_FIELDS: tuple[str, ...] = ("surgery_type", "surgeon", "unit")
PATIENT_FIELDS: tuple[str, ...] = ("name", "mrn", "surgery_type", "ot_date", "surgeon", "unit")

# Names as they appear on the wire, used in error messages.
WIRE_NAMES: dict[str, str] = {
    "name": "name",
    "mrn": "mrn",
    "surgery_type": "surgeryType",
    "ot_date": "otDate",
    "surgeon": "surgeon",
    "unit": "unit",
}


@dataclass(frozen=True)
class ValidationResult:
    cleaned: dict[str, Any] = field(default_factory=dict)
    missing: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.missing

    def raise_for_missing(self) -> None:
        if self.missing:
            raise MissingRequiredFieldError(fields=[WIRE_NAMES[f] for f in self.missing])


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_patient_fields(fields: Mapping[str, Any], *, partial: bool = False) -> ValidationResult:
    """Trim/default patient fields and report missing required ones.

    With ``partial=False`` (create) every required field must be present and non-blank,
    and absent optional text fields default to ``""``. With ``partial=True`` (update)
    only the fields present in ``fields`` are checked and returned.

    ``cleaned`` holds every provided value (trimmed) even when it is reported as
    missing; callers decide whether to enforce ``missing``.
    """

    cleaned: dict[str, Any] = {}
    missing: list[str] = []

    for name in PATIENT_FIELDS:
        if name not in fields:
            if partial:
                continue
            if name in REQUIRED_FIELDS:
                missing.append(name)
            else:
                cleaned[name] = ""
            continue

        value = fields[name]
        if name in REQUIRED_FIELDS:
            if _is_blank(value):
                missing.append(name)
        elif value is None:
            value = ""

        cleaned[name] = value.strip() if isinstance(value, str) else value

    return ValidationResult(cleaned=cleaned, missing=tuple(missing))
