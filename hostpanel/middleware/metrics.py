"""
Prometheus Metrics

Exposes:
  - http_requests_total                      (counter)
  - http_request_duration_seconds            (histogram)
  - http_requests_in_progress                (gauge)
  - provisioning_mutations_total             (counter)
  - provisioning_daemon_requests_total       (counter)
  - provisioning_stuck_items                 (gauge)
  - app_info                                 (info)
"""

import re
import time

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# ── HTTP metrics ──
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of in-progress requests",
    ["method"],
)
APP_INFO = Info("app", "Application metadata")

# ── Provisioning metrics ──
MUTATIONS = Counter(
    "provisioning_mutations_total",
    "Provisioning mutations by operation and outcome",
    ["operation", "outcome"],  # outcome: committed / rolled_back
)
DAEMON_REQUESTS = Counter(
    "provisioning_daemon_requests_total",
    "Daemon wake-up attempts",
    ["outcome"],  # delivered / failed / skipped
)
STUCK_ITEMS = Gauge(
    "provisioning_stuck_items",
    "Items whose status is outside the expected set, by kind",
    ["kind"],
)


def _normalize_path(path: str) -> str:
    """Collapse numeric path segments to prevent cardinality explosion."""
    return re.sub(r"/\d+", "/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = _normalize_path(request.url.path)

        # Skip metrics endpoint itself
        if path == "/metrics":
            return await call_next(request)

        REQUESTS_IN_PROGRESS.labels(method=method).inc()
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            REQUEST_COUNT.labels(method=method, endpoint=path, status="500").inc()
            REQUEST_DURATION.labels(method=method, endpoint=path).observe(
                time.perf_counter() - start
            )
            REQUESTS_IN_PROGRESS.labels(method=method).dec()
            raise

        elapsed = time.perf_counter() - start
        REQUEST_COUNT.labels(method=method, endpoint=path, status=str(response.status_code)).inc()
        REQUEST_DURATION.labels(method=method, endpoint=path).observe(elapsed)
        REQUESTS_IN_PROGRESS.labels(method=method).dec()

        return response


def metrics_endpoint(request: Request) -> Response:
    """Expose /metrics for Prometheus scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def set_app_info(version: str, env: str = "development") -> None:
    """Set application info metric."""
    APP_INFO.info({"version": version, "environment": env})
