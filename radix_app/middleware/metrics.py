"""Prometheus metrics middleware for FastAPI."""

import re
import time
from collections.abc import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from radix_app.services.converter_service import MAX_BASE, MIN_BASE

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total", "Total number of HTTP requests", ["method", "endpoint", "status_code"]
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["method", "endpoint"]
)

IN_PROGRESS_REQUESTS = Gauge(
    "http_requests_in_progress", "Number of HTTP requests currently being processed"
)

# Application-specific metrics
NUMBER_CONVERSIONS_TOTAL = Counter(
    "number_conversions_total",
    "Total number of number base conversions performed",
    ["source_base", "target_base", "status"],
)

SESSION_UNDO_TOTAL = Counter(
    "session_undo_total", "Total number of conversions undone in sessions"
)

ACTIVE_SESSIONS = Gauge("active_sessions", "Number of live conversion sessions")

DATABASE_OPERATIONS_TOTAL = Counter(
    "database_operations_total",
    "Total number of database operations",
    ["operation", "table", "status"],
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = self._get_endpoint_pattern(request)
        method = request.method

        IN_PROGRESS_REQUESTS.inc()
        start_time = time.time()

        try:
            response = await call_next(request)
            REQUEST_COUNT.labels(
                method=method, endpoint=endpoint, status_code=str(response.status_code)
            ).inc()
            return response

        except Exception:
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code="500").inc()
            raise

        finally:
            REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(
                time.time() - start_time
            )
            IN_PROGRESS_REQUESTS.dec()

    def _get_endpoint_pattern(self, request: Request) -> str:
        """Extract endpoint pattern from request for consistent labeling."""
        if "route" in request.scope:
            route = request.scope["route"]
            if hasattr(route, "path"):
                return route.path

        # Session ids are uuid7, group them under one label
        path = re.sub(
            r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
            "/{session_id}",
            request.url.path,
        )
        return re.sub(r"/\d+", "/{id}", path)


def get_metrics() -> str:
    """Get current metrics in Prometheus format."""
    return generate_latest().decode("utf-8")


def _base_label(base: int) -> str:
    # Unsupported bases share one label
    return str(base) if MIN_BASE <= base <= MAX_BASE else "invalid"


def record_number_conversion(source_base: int, target_base: int, *, success: bool = True):
    """Record a number base conversion."""
    status = "success" if success else "error"
    NUMBER_CONVERSIONS_TOTAL.labels(
        source_base=_base_label(source_base),
        target_base=_base_label(target_base),
        status=status,
    ).inc()


def record_session_undo():
    """Record an undo performed in a session."""
    SESSION_UNDO_TOTAL.inc()


def record_database_operation(operation: str, table: str, *, success: bool = True):
    """Record database operation metrics."""
    status = "success" if success else "error"
    DATABASE_OPERATIONS_TOTAL.labels(operation=operation, table=table, status=status).inc()
