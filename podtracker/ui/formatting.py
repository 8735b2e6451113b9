"""Presentation helpers that do not depend on Streamlit."""

from __future__ import annotations

from datetime import date, datetime


def format_ot_date(value: date | datetime | str) -> str:
    """``2024-01-06`` -> ``Jan 6, 2024``."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return f"{value:%b} {value.day}, {value.year}"


def patient_count_label(count: int) -> str:
    return f"{count} patient{'' if count == 1 else 's'} found"


def pod_label(pod: int) -> str:
    return f"POD {pod}"


def missing_form_fields(*, name: str, mrn: str, ot_date: date | None) -> list[str]:
    """Labels of required form fields that are still empty."""
    missing: list[str] = []
    if not name.strip():
        missing.append("Name")
    if not mrn.strip():
        missing.append("MRN")
    if ot_date is None:
        missing.append("OT Date")
    return missing
