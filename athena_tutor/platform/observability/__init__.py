"""Observability infrastructure module.

This module provides monitoring and error tracking:
- Structured logging with correlation IDs
- Prometheus metrics for HTTP, relay rounds and math tools
- Bugsnag error reporting
"""

from athena_tutor.platform.observability.logging import (
    configure_logging,
    correlation_id_ctx,
    get_logger,
)
from athena_tutor.platform.observability.metrics import (
    BUCKETS,
    ToolMetricsLabels,
    prometheus_middleware,
    record_relay_round,
    record_tool_call,
)

__all__ = [
    "BUCKETS",
    "ToolMetricsLabels",
    "configure_logging",
    "correlation_id_ctx",
    "get_logger",
    "prometheus_middleware",
    "record_relay_round",
    "record_tool_call",
]
