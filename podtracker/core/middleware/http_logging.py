"""Request logging middleware.

One structured log line per request carrying metadata only: method, route template,
status code, duration and a correlation id. Bodies, query strings and headers are
never logged because they may contain patient names or MRNs.
"""

from __future__ import annotations

import logging
import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from podtracker.core.middleware.routes import route_template

logger = logging.getLogger("podtracker.http")

REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


def resolve_request_id(request: Request) -> str:
    """Pick the correlation id for a request.

    Order: a well-formed ``X-Request-ID`` header, then the AWS request id when running
    behind the serverless adapter, then a fresh UUID4. Anything outside a narrow
    character set is discarded to avoid log injection.
    """

    candidate = request.headers.get(REQUEST_ID_HEADER)
    if candidate and _SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate

    aws_context = request.scope.get("aws.context")
    aws_request_id = getattr(aws_context, "aws_request_id", None)
    if isinstance(aws_request_id, str) and _SAFE_REQUEST_ID_PATTERN.fullmatch(aws_request_id):
        return aws_request_id

    return uuid.uuid4().hex


class HttpLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001 - logged with stack trace, then re-raised
            logger.exception(
                "Unhandled exception while processing request",
                extra={
                    "request_id": request_id,
                    "http_method": request.method,
                    "request_path": route_template(request),
                    "status_code": 500,
                    "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                },
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "http_method": request.method,
                "request_path": route_template(request),
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
            },
        )
        return response
