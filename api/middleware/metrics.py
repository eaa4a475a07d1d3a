"""
Prometheus metrics middleware for the MEDDPICC qualification API.

Exposes /metrics endpoint with request counters, latency histograms,
and qualification business metrics.
"""

import logging
import time

from fastapi import Request, Response
from prometheus_client import (
    Counter, Histogram, Gauge,
    generate_latest, CONTENT_TYPE_LATEST,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    "meddpicc_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "meddpicc_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
ACTIVE_REQUESTS = Gauge(
    "meddpicc_http_active_requests",
    "Currently active HTTP requests",
)

# Business metrics
ASSESSMENT_SCORE_HIST = Histogram(
    "meddpicc_assessment_total_score",
    "Assessment total score distribution",
    buckets=[25, 50, 100, 150, 192, 240, 256, 300, 352],
)
RISK_LEVEL_COUNT = Counter(
    "meddpicc_assessment_risk_total",
    "Assessments scored per risk level",
    ["risk_level"],
)


def record_assessment_score(score: float):
    """Record an assessment total score."""
    ASSESSMENT_SCORE_HIST.observe(score)


def record_risk_level(risk_level: str):
    """Record the risk level of a scored assessment."""
    RISK_LEVEL_COUNT.labels(risk_level=risk_level).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware that records HTTP request metrics."""

    async def dispatch(self, request: Request, call_next):
        ACTIVE_REQUESTS.inc()
        start = time.time()

        try:
            response = await call_next(request)
        except Exception:
            ACTIVE_REQUESTS.dec()
            raise

        duration = time.time() - start
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)
        ACTIVE_REQUESTS.dec()

        return response


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
