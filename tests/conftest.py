from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from podtracker.core.db import Base, create_engine


@pytest.fixture()
def database_url(tmp_path) -> str:
    db_file = tmp_path / "test.sqlite3"
    return f"sqlite+aiosqlite:///{db_file}"


@pytest.fixture(autouse=True)
def _set_test_env(database_url: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("POD_TIMEZONE", "UTC")
    monkeypatch.delenv("FRONTEND_URL", raising=False)
    # Settings and databases are cached per process; clear so each test gets its own DB.
    from podtracker.core.db import get_database
    from podtracker.core.settings import get_settings

    get_settings.cache_clear()
    get_database.cache_clear()


@pytest.fixture(autouse=True)
def _create_test_schema(database_url: str) -> None:
    async def run() -> None:
        # Ensure model modules are imported so Base.metadata is populated.
        from podtracker.patients import models as _patients_models  # noqa: F401

        engine = create_engine(database_url=database_url)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(run())


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from podtracker.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def frozen_now(monkeypatch: pytest.MonkeyPatch):
    """Freeze the POD clock; call the returned function to set 'now'."""
    from podtracker.patients import pod

    state = {"now": datetime(2024, 1, 6, 12, 0, tzinfo=UTC)}
    monkeypatch.setattr(pod, "utc_now", lambda: state["now"])

    def set_now(value: datetime) -> None:
        state["now"] = value

    return set_now
