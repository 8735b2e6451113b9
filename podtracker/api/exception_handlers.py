from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from podtracker.core.settings import get_settings
from podtracker.domain.exceptions import (
    DatabaseConnectionError,
    MissingRequiredFieldError,
    PatientNotFoundError,
    PodTrackerError,
)

logger = logging.getLogger("podtracker.errors")

_GENERIC_SERVER_ERROR = "An error occurred processing your request"


def _log_extra(request: Request, *, status_code: int, error: str) -> dict[str, Any]:
    # IMPORTANT: do not log request bodies, query values, or any PHI.
    route = request.scope.get("route")
    return {
        "request_id": getattr(request.state, "request_id", None)
        or request.headers.get("X-Request-ID"),
        "http_method": request.method,
        "request_path": getattr(route, "path", None) or "unmatched",
        "status_code": status_code,
        "error": error,
    }


def _error_response(status_code: int, error: str, detail: str, **extra: Any) -> JSONResponse:
    content = {"error": error, "detail": detail, **extra}
    return JSONResponse(status_code=status_code, content=content)


def available_routes(app: FastAPI) -> list[str]:
    """Return ``"METHOD /path"`` for every documented route, in registration order."""
    routes: list[str] = []
    for route in app.routes:
        if isinstance(route, APIRoute) and route.include_in_schema:
            for method in sorted(route.methods):
                routes.append(f"{method} {route.path}")
    return routes


def _server_error_detail(exc: BaseException, fallback: str) -> str:
    if not get_settings().is_development:
        return fallback
    cause = exc.__cause__
    return f"{exc}: {cause}" if cause is not None else str(exc) or fallback


def unexpected_error_response(exc: BaseException) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": _server_error_detail(exc, _GENERIC_SERVER_ERROR),
        },
    )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Answer exceptions no handler claimed with the generic 500 body.

    Installed inside CORSMiddleware. Starlette's ServerErrorMiddleware answers
    outside every user middleware, so its responses carry no CORS headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:  # noqa: BLE001 - stack trace logged by HttpLoggingMiddleware
            return unexpected_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(MissingRequiredFieldError)
    async def handle_missing_required_field(
        request: Request,
        exc: MissingRequiredFieldError,
    ) -> JSONResponse:
        logger.info(
            "Patient validation failed",
            extra=_log_extra(request, status_code=400, error="missing_required_field"),
        )
        return _error_response(400, "MissingRequiredField", exc.message, fields=list(exc.fields))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "Request validation failed",
            extra=_log_extra(request, status_code=400, error="invalid_request"),
        )
        errors = [
            {
                # loc starts with "body"/"path"/"query"
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return _error_response(400, "InvalidRequest", "Invalid request", errors=errors)

    @app.exception_handler(PatientNotFoundError)
    async def handle_patient_not_found(
        request: Request,
        exc: PatientNotFoundError,
    ) -> JSONResponse:
        return _error_response(404, "NotFound", exc.message)

    @app.exception_handler(DatabaseConnectionError)
    async def handle_database_connection_error(
        request: Request,
        exc: DatabaseConnectionError,
    ) -> JSONResponse:
        logger.error(
            "Database unavailable",
            extra=_log_extra(request, status_code=500, error="connection_failure"),
            exc_info=exc,
        )
        return _error_response(
            500, "ConnectionFailure", _server_error_detail(exc, "Database unavailable")
        )

    @app.exception_handler(PodTrackerError)
    async def handle_store_error(request: Request, exc: PodTrackerError) -> JSONResponse:
        logger.error(
            "Patient store failure",
            extra=_log_extra(request, status_code=500, error="internal_failure"),
            exc_info=exc,
        )
        return _error_response(
            500, "InternalFailure", _server_error_detail(exc, _GENERIC_SERVER_ERROR)
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        # Routing raises 404 for unknown paths and 405 for known paths with an unsupported
        # method; both are reported as an unmatched route.
        if exc.status_code in (404, 405):
            return _error_response(
                404,
                "Not Found",
                f"Route {request.method} {request.url.path} not found",
                availableRoutes=available_routes(app),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "HTTPError", "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        # Only reached for errors raised outside UnhandledErrorMiddleware.
        return unexpected_error_response(exc)
