# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware — request ID propagation and Prometheus metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from squarehead.core.logging import get_logger, request_id_var
from squarehead.metrics.prometheus import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

logger = get_logger(__name__)

# Path segments kept verbatim in the endpoint label; anything else (ids,
# setting keys) is collapsed so label cardinality stays bounded.
ROUTE_SEGMENTS: frozenset[str] = frozenset({
    "api", "v1", "members", "assignable", "schedules", "current", "next",
    "add-dates", "generate", "assignments", "promote", "text", "settings",
    "email", "test-reminders", "cron", "reminders", "health", "ready", "metrics",
})

UNTRACKED_PATHS: frozenset[str] = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def endpoint_label(path: str) -> str:
    """``/api/v1/members/12`` -> ``/api/v1/members/{id}``."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    labelled = []
    for segment in segments:
        if segment in ROUTE_SEGMENTS:
            labelled.append(segment)
        elif segment.isdigit():
            labelled.append("{id}")
        else:
            labelled.append("{key}")
    return "/" + "/".join(labelled)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Accept or mint an X-Request-ID and expose it to logging for the request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Request count, latency and error responses per normalised endpoint."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = endpoint_label(request.url.path)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
            if response.status_code >= 500:
                logger.error("%s %s -> %s", request.method, request.url.path, status)
        return response
