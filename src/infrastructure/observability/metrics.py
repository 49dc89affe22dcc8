"""
Prometheus metrics definitions and FastAPI instrumentation.

Defines provisioning metrics and provides a ``setup_metrics`` function
that wires automatic request tracking into any FastAPI application.
"""

from __future__ import annotations

import time
from decimal import Decimal

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response as StarletteResponse


# ======================================================================
# Custom metrics (module-level singletons)
# ======================================================================

api_requests_total = Counter(
    "api_requests_total",
    "Total number of API requests",
    labelnames=["method", "endpoint", "status"],
    registry=REGISTRY,
)

api_request_duration_seconds = Histogram(
    "api_request_duration_seconds",
    "Request latency in seconds",
    labelnames=["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

server_operations_total = Counter(
    "server_operations_total",
    "Server mutations accepted by the provisioning backend",
    labelnames=["event_type"],
    registry=REGISTRY,
)

server_charge_amount = Histogram(
    "server_charge_amount",
    "Amount quoted for accepted server mutations",
    labelnames=["event_type"],
    buckets=(0.0, 1.0, 5.0, 10.0, 25.0, 50.0, 100.0, 250.0, 500.0, 1000.0),
    registry=REGISTRY,
)

request_rejections_total = Counter(
    "request_rejections_total",
    "Requests rejected locally or by the backend, by error title",
    labelnames=["reason", "status"],
    registry=REGISTRY,
)


def record_server_event(event_type: str, amount: Decimal) -> None:
    server_operations_total.labels(event_type=event_type).inc()
    server_charge_amount.labels(event_type=event_type).observe(float(amount))


def record_rejection(reason: str, status_code: int) -> None:
    request_rejections_total.labels(reason=reason, status=str(status_code)).inc()


# ======================================================================
# Middleware for automatic request instrumentation
# ======================================================================

class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request count and latency per endpoint."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        method = request.method

        start = time.perf_counter()
        response: Response = await call_next(request)
        duration = time.perf_counter() - start

        # The route is only resolved once the request has been handled.
        endpoint = self._get_path_template(request)

        api_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status=str(response.status_code),
        ).inc()

        api_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)

        return response

    @staticmethod
    def _get_path_template(request: Request) -> str:
        """
        Attempt to resolve the route template (e.g. ``/servers/{server_id}``)
        so that cardinality stays bounded.
        """
        route = request.scope.get("route")
        if route and hasattr(route, "path"):
            return route.path
        return request.url.path


# ======================================================================
# Setup helper
# ======================================================================

def setup_metrics(app: FastAPI) -> None:
    """
    Instrument a FastAPI application with Prometheus metrics.

    * Adds the ``PrometheusMiddleware`` for automatic request tracking.
    * Registers a ``/metrics`` endpoint that serves the Prometheus
      exposition format.
    """

    app.add_middleware(PrometheusMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> StarletteResponse:
        body = generate_latest(REGISTRY)
        return StarletteResponse(
            content=body,
            media_type=CONTENT_TYPE_LATEST,
        )
