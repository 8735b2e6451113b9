from __future__ import annotations

import time
from typing import cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from podtracker.core.middleware.routes import route_template

metrics_router = APIRouter(tags=["monitoring"])

# Labels are route templates only; patient ids never become label values.
_LABELS = ("method", "route", "status_code")

http_requests_total = Counter(
    "podtracker_http_requests_total",
    "Total HTTP requests handled by the POD tracker API",
    labelnames=_LABELS,
)

http_request_duration_seconds = Histogram(
    "podtracker_http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=_LABELS,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            labels = {
                "method": request.method,
                "route": route_template(request),
                "status_code": str(status_code),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(time.perf_counter() - started)


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    # Default registry: per-process counters (each warm function instance reports its own).
    return Response(content=cast(bytes, generate_latest()), media_type=CONTENT_TYPE_LATEST)
