"""Database engine lifecycle.

The engine is process-wide state: it is created lazily on first use, dropped when
SQLAlchemy reports a disconnect (the next use creates a fresh one), and only disposed
by an explicit shutdown. The stateless function deployment relies on this to reuse
pooled connections across warm invocations.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from functools import lru_cache
from typing import Any

from fastapi import Request
from sqlalchemy import MetaData, event, text
from sqlalchemy.engine import ExceptionContext
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from podtracker.domain.exceptions import DatabaseConnectionError

logger = logging.getLogger("podtracker.db")


def _create_naming_convention() -> dict[str, str]:
    return {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


metadata_obj = MetaData(naming_convention=_create_naming_convention())


class Base(DeclarativeBase):
    metadata = metadata_obj


def create_engine(*, database_url: str, connect_timeout_seconds: float = 5.0) -> AsyncEngine:
    # Both asyncpg and aiosqlite accept a `timeout` connect argument.
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        connect_args={"timeout": connect_timeout_seconds},
    )


def create_sessionmaker(*, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class Database:
    """Lazily-created engine + sessionmaker for one database URL."""

    def __init__(self, *, database_url: str, connect_timeout_seconds: float = 5.0) -> None:
        if not database_url:
            raise DatabaseConnectionError("DATABASE_URL is not set")
        self._database_url = database_url
        self._connect_timeout_seconds = connect_timeout_seconds
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._retired: list[AsyncEngine] = []

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            try:
                engine = create_engine(
                    database_url=self._database_url,
                    connect_timeout_seconds=self._connect_timeout_seconds,
                )
            except (ArgumentError, ImportError) as exc:
                raise DatabaseConnectionError("DATABASE_URL is invalid") from exc
            event.listen(engine.sync_engine, "handle_error", self._on_engine_error)
            self._engine = engine
            self._sessionmaker = create_sessionmaker(engine=engine)
            # Never log the URL itself: it carries credentials.
            logger.info("Database engine created", extra={"dialect": engine.dialect.name})
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.engine
        if self._sessionmaker is None:
            self._sessionmaker = create_sessionmaker(engine=engine)
        return self._sessionmaker

    def _on_engine_error(self, context: ExceptionContext) -> None:
        if context.is_disconnect:
            logger.warning("Database disconnect detected; engine will be recreated on next use")
            self.invalidate()

    def invalidate(self) -> None:
        """Retire the current engine; the next use creates a fresh one.

        Retired engines are disposed by the next `release_retired()`, `ping()` or
        `dispose()`. Sessions still holding one of their connections keep working.
        """
        if self._engine is not None:
            self._retired.append(self._engine)
        self._engine = None
        self._sessionmaker = None

    async def release_retired(self) -> None:
        while self._retired:
            await self._retired.pop().dispose()

    async def ping(self) -> None:
        """Open a connection and run a trivial query, failing fast when unreachable."""
        await self.release_retired()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            self.invalidate()
            raise DatabaseConnectionError("Database is unreachable") from exc

    async def dispose(self) -> None:
        self.invalidate()
        await self.release_retired()


@lru_cache
def get_database(database_url: str, connect_timeout_seconds: float = 5.0) -> Database:
    return Database(database_url=database_url, connect_timeout_seconds=connect_timeout_seconds)


def init_db(*, app: Any, database_url: str, connect_timeout_seconds: float = 5.0) -> Database:
    database = get_database(database_url, connect_timeout_seconds)
    app.state.database = database
    return database


async def close_db(*, app: Any) -> None:
    database: Database | None = getattr(app.state, "database", None)
    if database is None:
        return
    await database.dispose()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseConnectionError("Database is not initialized")
    await database.release_retired()
    async with database.sessionmaker() as session:
        yield session
