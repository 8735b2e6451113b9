from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from podtracker.core.settings import get_settings
from podtracker.patients.models import Patient
from podtracker.patients.pod import current_pod
from podtracker.patients.schemas import PatientCreate, PatientDeletedOut, PatientOut, PatientUpdate
from podtracker.patients.store import PatientStore
from podtracker.patients.validation import validate_patient_fields

logger = logging.getLogger("podtracker.patients")


def to_patient_out(patient: Patient, *, timezone_name: str | None = None) -> PatientOut:
    """Build the response representation, deriving ``pod`` at read time."""
    tz_name = timezone_name or get_settings().pod_timezone
    return PatientOut(
        id=patient.id,
        name=patient.name,
        mrn=patient.mrn,
        surgery_type=patient.surgery_type,
        ot_date=patient.ot_date,
        surgeon=patient.surgeon,
        unit=patient.unit,
        created_at=patient.created_at,
        updated_at=patient.updated_at,
        pod=current_pod(patient.ot_date, timezone_name=tz_name),
    )


async def handle_create(*, session: AsyncSession, payload: PatientCreate) -> PatientOut:
    fields = payload.provided_fields()
    # Reject before the store is touched; nothing is written for an invalid payload.
    validate_patient_fields(fields).raise_for_missing()

    patient = await PatientStore(session).create(fields)
    logger.info("Patient created", extra={"patient_id": str(patient.id)})
    return to_patient_out(patient)


async def handle_list(*, session: AsyncSession) -> list[PatientOut]:
    patients = await PatientStore(session).find_all()
    tz_name = get_settings().pod_timezone
    return [to_patient_out(p, timezone_name=tz_name) for p in patients]


async def handle_get(*, session: AsyncSession, patient_id: str) -> PatientOut:
    patient = await PatientStore(session).find_by_id(patient_id)
    return to_patient_out(patient)


async def handle_update(
    *, session: AsyncSession, patient_id: str, payload: PatientUpdate | None
) -> PatientOut:
    fields = payload.provided_fields() if payload is not None else {}
    # Fields that are sent must satisfy the same invariants as on create; omitted
    # fields are left as they are.
    validate_patient_fields(fields, partial=True).raise_for_missing()

    patient = await PatientStore(session).update_by_id(patient_id, fields)
    logger.info("Patient updated", extra={"patient_id": str(patient.id)})
    return to_patient_out(patient)


async def handle_delete(*, session: AsyncSession, patient_id: str) -> PatientDeletedOut:
    await PatientStore(session).delete_by_id(patient_id)
    logger.info("Patient deleted", extra={"patient_id": patient_id})
    return PatientDeletedOut(message="Patient deleted")
