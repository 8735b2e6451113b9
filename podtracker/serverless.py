"""Stateless function entry point (AWS Lambda / Netlify Functions).

API Gateway, HTTP API and ALB events are handled by Mangum directly. Netlify events
carry the same `httpMethod`/`path` fields without a `requestContext`, and are
handled by NetlifyFunctions.

The ASGI app, its Mangum adapter and the database engine are built on the first
(cold) invocation and reused by every warm invocation in the same execution
environment. A cold start that fails leaves nothing cached, so the next invocation
tries again.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from datetime import UTC, datetime
from typing import Any

from mangum import Mangum
from mangum.handlers import APIGateway
from mangum.types import LambdaConfig, LambdaContext, LambdaEvent, Scope

from podtracker.core.settings import get_settings
from podtracker.domain.exceptions import DatabaseConnectionError
from podtracker.main import create_app

logger = logging.getLogger("podtracker.serverless")

_NETLIFY_FUNCTION_PREFIX = re.compile(r"^/\.netlify/functions/[^/]+(?=/|$)")

_handler: Mangum | None = None
_loop: asyncio.AbstractEventLoop | None = None


class NetlifyFunctions(APIGateway):
    """Netlify Functions event (API Gateway v1 shape without `requestContext`).

    Requests invoked through `/.netlify/functions/<name>/...` have that prefix
    stripped so routes match the same paths as behind a redirect.
    """

    @classmethod
    def infer(cls, event: LambdaEvent, context: LambdaContext, config: LambdaConfig) -> bool:
        return "httpMethod" in event and "path" in event and "requestContext" not in event

    def __init__(self, event: LambdaEvent, context: LambdaContext, config: LambdaConfig) -> None:
        path = _NETLIFY_FUNCTION_PREFIX.sub("", event["path"]) or "/"
        super().__init__({**event, "path": path, "requestContext": {}}, context, config)

    @property
    def scope(self) -> Scope:
        scope = super().scope
        client_ip = (self.event.get("headers") or {}).get("x-nf-client-connection-ip")
        scope["client"] = (client_ip, 0)
        return scope


def _ensure_event_loop() -> None:
    # Pooled connections are bound to the loop that opened them; keep one loop for
    # the lifetime of the execution environment.
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)


def get_handler() -> Mangum:
    """Return the cached adapter, building it on a cold start.

    Raises DatabaseConnectionError when DATABASE_URL is missing instead of exiting
    the process.
    """

    global _handler
    if _handler is not None:
        return _handler

    settings = get_settings()
    if not settings.database_url:
        raise DatabaseConnectionError("DATABASE_URL is not set")

    started = time.perf_counter()
    _ensure_event_loop()
    app = create_app(dispose_db_on_shutdown=False)
    _handler = Mangum(app, lifespan="auto", custom_handlers=[NetlifyFunctions])
    logger.info(
        "Handler built",
        extra={"cold_start": True, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
    )
    return _handler


def reset_handler() -> None:
    """Drop the cached handler, dispose its engine and close the loop.

    Used by tests and explicit teardown only.
    """
    global _handler, _loop
    database = getattr(_handler.app.state, "database", None) if _handler is not None else None
    _handler = None
    if _loop is not None and not _loop.is_closed():
        if database is not None:
            _loop.run_until_complete(database.dispose())
        _loop.close()
    _loop = None


def _error_response(context: Any) -> dict[str, Any]:
    return {
        "statusCode": 500,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps(
            {
                "error": "Internal Server Error",
                "detail": "An error occurred processing your request",
                "requestId": getattr(context, "aws_request_id", None),
                "timestamp": datetime.now(UTC).isoformat(),
            }
        ),
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    try:
        return get_handler()(event, context)
    except Exception:  # noqa: BLE001 - the function runtime expects a response, not a crash
        logger.exception(
            "Function invocation failed",
            extra={"request_id": getattr(context, "aws_request_id", None)},
        )
        return _error_response(context)
