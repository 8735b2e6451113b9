from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Date, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from podtracker.core.db import Base


def utcnow() -> datetime:
    # Application-side timestamps keep microsecond precision on every backend, which the
    # newest-first listing relies on (SQLite's CURRENT_TIMESTAMP only has seconds).
    return datetime.now(UTC)


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Indexed for lookup but not unique: readmissions share an MRN.
    mrn: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    surgery_type: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    ot_date: Mapped[date] = mapped_column(Date, nullable=False)
    surgeon: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    unit: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
