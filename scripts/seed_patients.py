"""Seed surgical patients for local development.

This script is designed to be safe to run multiple times:
- It only runs when APP_ENV=development
- It inserts rows only when the patients table is empty
- Operative dates are relative to today so the seeded PODs stay meaningful
"""

# ruff: noqa: I001
from __future__ import annotations

import asyncio
import uuid
from datetime import date, timedelta

from sqlalchemy import func, select

from podtracker.core.db import get_database
from podtracker.core.settings import get_settings
from podtracker.patients.models import Patient, utcnow

# (name, mrn, surgery type, days since surgery, surgeon, unit)
_SEED_PATIENTS: list[tuple[str, str, str, int, str, str]] = [
    ("Jane Doe", "MRN123", "Laparoscopic cholecystectomy", 5, "Dr. Okafor", "Ward 4B"),
    ("John Smith", "MRN124", "Total knee replacement", 2, "Dr. Lindqvist", "Ortho 2"),
    ("Maria Garcia", "MRN125", "Appendectomy", 0, "Dr. Okafor", "Ward 4B"),
    ("Wei Chen", "MRN126", "CABG x3", 9, "Dr. Haddad", "CTICU"),
    ("Aisha Bello", "MRN127", "Hemicolectomy", 14, "Dr. Novak", "Ward 5A"),
    ("Tom Walsh", "MRN128", "Inguinal hernia repair", 1, "", "Day Surgery"),
    ("Priya Nair", "MRN129", "Thyroidectomy", -2, "Dr. Haddad", ""),
]


def _seed_rows(*, today: date) -> list[dict]:
    """Return deterministic seed rows (stable UUIDs, dates relative to ``today``)."""
    ns = uuid.UUID("6f1c2a52-8a3e-4d4f-9d8e-2b7c0f3f5a10")
    rows: list[dict] = []
    for name, mrn, surgery_type, days_ago, surgeon, unit in _SEED_PATIENTS:
        rows.append(
            {
                "id": uuid.uuid5(ns, mrn),
                "name": name,
                "mrn": mrn,
                "surgery_type": surgery_type,
                "ot_date": today - timedelta(days=days_ago),
                "surgeon": surgeon,
                "unit": unit,
            }
        )
    return rows


async def seed_patients_if_empty(*, database_url: str) -> None:
    database = get_database(database_url)

    async with database.sessionmaker() as session:
        total = int((await session.execute(select(func.count()).select_from(Patient))).scalar_one())
        if total > 0:
            print(f"Seed skipped: patients table already has {total} row(s).")
            await database.dispose()
            return

        patients = []
        for row in _seed_rows(today=date.today()):
            now = utcnow()
            patients.append(Patient(**row, created_at=now, updated_at=now))
        session.add_all(patients)
        await session.commit()
        print(f"Seeded {len(patients)} patients.")

    await database.dispose()


def main() -> None:
    """Entry point."""
    settings = get_settings()
    if not settings.is_development:
        print(f"Seed skipped: APP_ENV={settings.app_env!r} (seeding only runs in development).")
        return

    if not settings.database_url:
        raise SystemExit("DATABASE_URL is not set")

    asyncio.run(seed_patients_if_empty(database_url=settings.database_url))


if __name__ == "__main__":
    main()
