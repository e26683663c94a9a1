"""Prometheus metrics collection and HTTP middleware.

HTTP request duration histograms for every route, plus counters and timings
for the chat relay: rounds opened against the model provider and math tool
invocations.
"""

from time import monotonic
from typing import NamedTuple

import prometheus_client


class HTTPLabels(NamedTuple):
    method: str
    path: str
    http_status: str


class ToolMetricsLabels(NamedTuple):
    tool_name: str


_NXX_LUT = ["1XX", "2XX", "3XX", "4XX", "5XX"]


def http_status_nxx(status: int) -> str:
    """A coarser 2XX, 4XX, 5XX"""
    return _NXX_LUT[status // 100 - 1]


BUCKETS = (
    # log spaced, 3 per decade
    0.0002,  # 200 μs
    0.0005,
    0.001,  # 1 ms
    0.002,
    0.005,
    0.01,
    0.02,
    0.05,
    0.1,
    0.2,
    0.5,
    1,
    2,
    5,
    10,
    20,
    60,
    300,  # streaming chat responses can run for minutes
    float("inf"),
)


def get_path(routes, scope) -> str:
    """Extract the matched route path from a request scope.

    Args:
        routes: List of FastAPI/Starlette route objects
        scope: ASGI request scope dictionary

    Returns:
        The matched route path template, or "path-not-found" if no match
    """
    path = "path-not-found"
    for route in routes:
        _, matches = route.matches(scope)
        if len(matches) > 0:
            path = route.path
    return path


async def prometheus_middleware(request, call_next):
    """HTTP middleware that records request duration metrics.

    For streaming responses this measures time to first byte, not the full
    stream; relay rounds are counted separately.
    """
    start_time = monotonic()
    response = await call_next(request)
    elapsed_sec = monotonic() - start_time
    path = get_path(request.app.routes, request.scope)

    labels = HTTPLabels(
        method=request.method,
        path=path,
        http_status=http_status_nxx(response.status_code),
    )
    http_histogram.labels(*labels).observe(elapsed_sec)

    return response


def setup_http_metrics(registry):
    return prometheus_client.Histogram(
        name="http_request_duration_seconds",
        documentation="Request duration (seconds)",
        labelnames=HTTPLabels._fields,
        registry=registry,
        buckets=BUCKETS,
    )


def setup_relay_metrics(registry):
    rounds = prometheus_client.Counter(
        name="tutor_relay_rounds",
        documentation="Streaming rounds opened against the model provider",
        labelnames=("round",),
        registry=registry,
    )
    tool_calls = prometheus_client.Counter(
        name="tutor_tool_calls",
        documentation="Math tool invocations by outcome",
        labelnames=("tool_name", "status"),
        registry=registry,
    )
    tool_duration = prometheus_client.Histogram(
        name="tutor_tool_call_duration_seconds",
        documentation="Math tool execution time (seconds)",
        labelnames=ToolMetricsLabels._fields,
        registry=registry,
        buckets=BUCKETS,
    )
    return rounds, tool_calls, tool_duration


def record_relay_round(round_number: int) -> None:
    """Count a streaming round (1 for the first pass, 2 for the continuation)."""
    relay_rounds_counter.labels(str(round_number)).inc()


def record_tool_call(labels: ToolMetricsLabels, duration: float, error: bool = False) -> None:
    """Record one math tool invocation.

    Args:
        labels: Tool labels
        duration: Execution time in seconds
        error: Whether the tool resolved to an error payload
    """
    status = "error" if error else "ok"
    tool_calls_counter.labels(labels.tool_name, status).inc()
    tool_duration_histogram.labels(*labels).observe(duration)


http_histogram = setup_http_metrics(registry=prometheus_client.REGISTRY)
relay_rounds_counter, tool_calls_counter, tool_duration_histogram = setup_relay_metrics(
    registry=prometheus_client.REGISTRY
)


def metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics output for the /metrics endpoint.

    Returns:
        Tuple of (metrics_body, content_type) for the HTTP response
    """
    return (
        prometheus_client.generate_latest(prometheus_client.REGISTRY),
        prometheus_client.CONTENT_TYPE_LATEST,
    )
