from __future__ import annotations

"""Prometheus metrics for the BriefDesk API.

Adds an HTTP middleware that records request latency per method/path/status,
and a counter of resolved progress phases served to designers and clients.
"""

import logging
import time
from typing import Callable, Awaitable

from prometheus_client import Counter, Histogram
from starlette.requests import Request
from starlette.responses import Response


logger = logging.getLogger("briefdesk.metrics")

# Histogram buckets chosen for web latencies (seconds)
REQUEST_LATENCY = Histogram(
    "briefdesk_request_latency_seconds",
    "HTTP request latency in seconds",
    labelnames=("method", "path", "status"),
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)

PHASE_RESOLUTIONS = Counter(
    "briefdesk_phase_resolutions",
    "Progress phases resolved for display",
    labelnames=("phase", "audience"),
)


def record_phase(phase: str, audience: str) -> None:
    try:
        PHASE_RESOLUTIONS.labels(phase=phase, audience=audience).inc()
    except ValueError:
        logger.debug("Could not record phase metric for %s", phase)


def sanitize_path(path: str) -> str:
    """Reduce high-cardinality paths (e.g., /projects/{id}) to a coarse label.

    The ``/api`` mount is folded into the plain routes so both share a label.
    """
    segs = [s for s in path.split("?")[0].split("/") if s]
    if segs and segs[0] == "api":
        segs = segs[1:]
    if not segs:
        return "/"
    return "/" + segs[0]


def metrics_middleware_factory() -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    async def middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        path = sanitize_path(request.url.path)
        # Avoid observing the metrics endpoint itself
        if path == "/metrics":
            return await call_next(request)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        try:
            REQUEST_LATENCY.labels(
                method=request.method,
                path=path,
                status=str(response.status_code),
            ).observe(elapsed)
        except ValueError:
            # Never block the request due to metrics
            logger.debug("Could not record latency for %s", request.url.path)
        return response

    return middleware
