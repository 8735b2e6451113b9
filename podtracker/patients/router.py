from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from podtracker.api.schemas import ErrorOut
from podtracker.core.db import get_session
from podtracker.patients import service
from podtracker.patients.schemas import (
    PatientCreate,
    PatientDeletedOut,
    PatientOut,
    PatientUpdate,
)

router = APIRouter(prefix="/api/patients", tags=["patients"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorOut, "description": "Patient not found"}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PatientOut,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}},
    summary="Create a patient",
)
async def create_patient_route(
    payload: PatientCreate,
    session: AsyncSession = Depends(get_session),
) -> PatientOut:
    return await service.handle_create(session=session, payload=payload)


@router.get("", response_model=list[PatientOut], summary="List patients (newest first)")
async def list_patients_route(session: AsyncSession = Depends(get_session)) -> list[PatientOut]:
    return await service.handle_list(session=session)


@router.get("/{patient_id}", response_model=PatientOut, responses=_NOT_FOUND)
async def get_patient_route(
    patient_id: str,
    session: AsyncSession = Depends(get_session),
) -> PatientOut:
    return await service.handle_get(session=session, patient_id=patient_id)


@router.put(
    "/{patient_id}",
    response_model=PatientOut,
    responses={**_NOT_FOUND, status.HTTP_400_BAD_REQUEST: {"model": ErrorOut}},
    summary="Partially update a patient",
)
async def update_patient_route(
    patient_id: str,
    payload: PatientUpdate | None = None,
    session: AsyncSession = Depends(get_session),
) -> PatientOut:
    return await service.handle_update(session=session, patient_id=patient_id, payload=payload)


@router.delete("/{patient_id}", response_model=PatientDeletedOut, responses=_NOT_FOUND)
async def delete_patient_route(
    patient_id: str,
    session: AsyncSession = Depends(get_session),
) -> PatientDeletedOut:
    return await service.handle_delete(session=session, patient_id=patient_id)
