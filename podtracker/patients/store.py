from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from podtracker.domain.exceptions import (
    DatabaseConnectionError,
    PatientNotFoundError,
    PatientStoreError,
)
from podtracker.patients.models import Patient, utcnow
from podtracker.patients.validation import validate_patient_fields


def _parse_patient_id(patient_id: uuid.UUID | str) -> uuid.UUID:
    if isinstance(patient_id, uuid.UUID):
        return patient_id
    try:
        return uuid.UUID(str(patient_id))
    except ValueError:
        # A malformed id can never match a record.
        raise PatientNotFoundError() from None


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    try:
        yield
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise DatabaseConnectionError("Database connection lost") from exc
        raise PatientStoreError(message) from exc
    except SQLAlchemyError as exc:
        raise PatientStoreError(message) from exc


class PatientStore:
    """Single-row persistence operations for patients.

    Every operation touches exactly one row and commits on its own, so no
    multi-statement transaction or rollback bookkeeping is needed. Concurrent
    updates to the same row are last-writer-wins.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, fields: Mapping[str, Any]) -> Patient:
        result = validate_patient_fields(fields)
        result.raise_for_missing()

        now = utcnow()
        patient = Patient(**result.cleaned, created_at=now, updated_at=now)
        with _store_errors("Failed to create patient"):
            self._session.add(patient)
            await self._session.commit()
            await self._session.refresh(patient)
        return patient

    async def find_all(self) -> list[Patient]:
        stmt = select(Patient).order_by(Patient.created_at.desc(), Patient.id.desc())
        with _store_errors("Failed to fetch patients"):
            rows = (await self._session.execute(stmt)).scalars().all()
        return list(rows)

    async def find_by_id(self, patient_id: uuid.UUID | str) -> Patient:
        pid = _parse_patient_id(patient_id)
        with _store_errors("Failed to fetch patient"):
            patient = await self._session.get(Patient, pid)
        if patient is None:
            raise PatientNotFoundError()
        return patient

    async def update_by_id(self, patient_id: uuid.UUID | str, fields: Mapping[str, Any]) -> Patient:
        """Apply only the given fields; required-field presence is not re-checked here."""
        patient = await self.find_by_id(patient_id)
        cleaned = validate_patient_fields(fields, partial=True).cleaned
        for name, value in cleaned.items():
            setattr(patient, name, value)
        patient.updated_at = utcnow()

        with _store_errors("Failed to update patient"):
            await self._session.commit()
            await self._session.refresh(patient)
        return patient

    async def delete_by_id(self, patient_id: uuid.UUID | str) -> None:
        patient = await self.find_by_id(patient_id)
        with _store_errors("Failed to delete patient"):
            await self._session.delete(patient)
            await self._session.commit()
