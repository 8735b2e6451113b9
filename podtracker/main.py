from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from podtracker.api.exception_handlers import UnhandledErrorMiddleware, register_exception_handlers
from podtracker.api.schemas import HealthOut
from podtracker.core.db import close_db, init_db
from podtracker.core.logging import setup_logging
from podtracker.core.metrics import PrometheusMetricsMiddleware, metrics_router
from podtracker.core.middleware.http_logging import HttpLoggingMiddleware
from podtracker.core.settings import get_settings
from podtracker.patients.router import router as patients_router

setup_logging()


def create_app(*, verify_db: bool = True, dispose_db_on_shutdown: bool = True) -> FastAPI:
    """Assemble the API.

    ``verify_db`` opens a connection at startup so a long-running process refuses to
    start against an unreachable database. The serverless handler passes
    ``dispose_db_on_shutdown=False``: its adapter runs startup/shutdown around every
    invocation and the cached engine must survive between them.
    """

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Settings are read here rather than at import time so DATABASE_URL is only
        # required once the app actually starts.
        current = get_settings()
        database = init_db(
            app=app,
            database_url=current.database_url,
            connect_timeout_seconds=current.db_connect_timeout_seconds,
        )
        if verify_db and not database.is_initialized:
            await database.ping()
        yield
        if dispose_db_on_shutdown:
            await close_db(app=app)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Track surgical patients and their post-operative day (POD).\n\n"
            "- `pod` is derived on every response from `otDate` and today's date; it is "
            "never stored and cannot be set by clients.\n"
            "- Logging and metrics avoid PHI by using route templates and metadata only."
        ),
        lifespan=lifespan,
        docs_url="/swagger",
        redoc_url="/docs",
        openapi_tags=[
            {"name": "health", "description": "Basic uptime check."},
            {
                "name": "patients",
                "description": "Create, read, update and delete patient records.",
            },
        ],
    )

    # Last added runs first: CORS wraps the 500 fallback, then logging, then metrics.
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    @app.get("/", response_model=HealthOut, tags=["health"], summary="Health check")
    async def health() -> HealthOut:
        # Does not touch the database so it stays usable as a liveness probe.
        current = get_settings()
        return HealthOut(
            status="ok",
            service=current.app_name,
            timestamp=datetime.now(UTC),
            environment=current.app_env,
        )

    app.include_router(metrics_router)
    app.include_router(patients_router)
    return app


app = create_app()
