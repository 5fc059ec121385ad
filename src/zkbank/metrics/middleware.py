"""Prometheus HTTP request metrics middleware for FastAPI.

Exposes ``http_request_total`` (by method, route, status) and
``http_request_duration_seconds`` (by method, route).

Paths are labelled with the matched route template (``/api/transactions/{tx_id}``)
so per-transaction URLs do not create a label per identifier. A handler that
raises is counted as a 500 before the error propagates.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response

_APP_LABEL = "zkbank"
_UNMATCHED = "<unmatched>"


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or _UNMATCHED


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Records request count and duration per route template."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests = Counter(
            "http_request_total",
            "Total HTTP requests",
            ("method", "path", "status_code", "app"),
            registry=registry,
        )
        self._latency = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ("method", "path", "app"),
            registry=registry,
        )

    def _observe(self, request: Request, status_code: int, started: float) -> None:
        path = _route_path(request)
        self._requests.labels(request.method, path, str(status_code), _APP_LABEL).inc()
        self._latency.labels(request.method, path, _APP_LABEL).observe(
            time.monotonic() - started
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        started = time.monotonic()
        try:
            response: Response = await call_next(request)
        except Exception:
            self._observe(request, 500, started)
            raise
        self._observe(request, response.status_code, started)
        return response
