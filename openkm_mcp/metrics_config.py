"""Tool-call metrics for the OpenKM MCP server.

Local metrics collection using OpenTelemetry with a Prometheus reader. The
SSE transport serves the export on ``/metrics``; under stdio the meter still
counts calls so a debugger can inspect ``get_metrics_summary()``.
"""

from __future__ import annotations

import os
import socket
import time
from typing import Any

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import generate_latest

from . import __version__

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "openkm-mcp")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in a test or CI environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


default_metrics_enabled = "false" if is_test_environment() else "true"
METRICS_ENABLED = os.getenv("MCP_METRICS_ENABLED", default_metrics_enabled).lower() == "true"

meter = None
tool_calls_counter = None
tool_duration_histogram = None
prometheus_reader = None

_metrics_initialized = False


def get_resource() -> Resource:
    """Create the OpenTelemetry resource describing this service."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "host.name": socket.gethostname(),
        }
    )


def initialize_metrics() -> None:
    """Initialize the meter provider and the tool-call instruments."""
    global meter, tool_calls_counter, tool_duration_histogram, prometheus_reader

    prometheus_reader = PrometheusMetricReader()
    meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter(__name__)

    tool_calls_counter = meter.create_counter(
        name="openkm_mcp_tool_calls_total",
        description="Total number of MCP tool calls",
        unit="1",
    )
    tool_duration_histogram = meter.create_histogram(
        name="openkm_mcp_tool_duration_seconds",
        description="Wall-clock duration of MCP tool calls",
        unit="s",
    )


def is_metrics_enabled() -> bool:
    """Check if metrics collection is active."""
    return METRICS_ENABLED and meter is not None


def record_tool_call_start(tool_name: str) -> float | None:
    """Record the start of a tool call and return its start time."""
    if not is_metrics_enabled():
        return None
    return time.perf_counter()


def _record(tool_name: str, start_time: float | None, status: str) -> None:
    attributes = {"tool_name": tool_name, "status": status, "environment": DEPLOYMENT_ENVIRONMENT}
    if tool_calls_counter is not None:
        tool_calls_counter.add(1, attributes)
    if tool_duration_histogram is not None and start_time is not None:
        tool_duration_histogram.record(time.perf_counter() - start_time, {"tool_name": tool_name})


def record_tool_call_success(tool_name: str, start_time: float | None) -> None:
    """Record a tool call that produced a response."""
    if is_metrics_enabled():
        _record(tool_name, start_time, "success")


def record_tool_call_error(tool_name: str, start_time: float | None) -> None:
    """Record a tool call that raised."""
    if is_metrics_enabled():
        _record(tool_name, start_time, "error")


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus text format."""
    if not is_metrics_enabled():
        return "# Metrics not available\n", "text/plain"
    return generate_latest().decode("utf-8"), CONTENT_TYPE_LATEST


def get_metrics_summary() -> dict[str, Any]:
    """Get a metrics summary for debugging."""
    if not is_metrics_enabled():
        return {"status": "disabled"}
    return {
        "status": "active",
        "service_name": SERVICE_NAME,
        "service_version": __version__,
        "environment": DEPLOYMENT_ENVIRONMENT,
    }


def ensure_metrics_initialized() -> None:
    """Initialize metrics once, when the server starts."""
    global _metrics_initialized
    if _metrics_initialized:
        return
    if METRICS_ENABLED:
        initialize_metrics()
    _metrics_initialized = True


def shutdown_metrics() -> None:
    """Shut down the Prometheus reader."""
    if prometheus_reader is not None:
        prometheus_reader.shutdown()
