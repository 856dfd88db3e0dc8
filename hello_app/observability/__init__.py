"""
OpenTelemetry observability package for hello-app.

This package provides the trace and metric pipelines, context propagation,
and log correlation for the service.

Usage:
    from hello_app.observability import telemetry_lifecycle

    with telemetry_lifecycle(settings) as telemetry:
        with telemetry.tracer.start_as_current_span("work"):
            ...
        telemetry.instruments.record_execution()
"""

from hello_app.observability.config import (
    build_resource,
    configure_logging,
    start_telemetry,
    telemetry_lifecycle,
)
from hello_app.observability.context import (
    get_current_trace_id,
    install_propagator,
)
from hello_app.observability.errors import (
    ExporterUnreachableError,
    ResourceCreationError,
    TelemetryStartupError,
)
from hello_app.observability.metrics import HelloMetrics
from hello_app.observability.telemetry import TelemetryContext
from hello_app.observability.tracing import add_span_attributes, record_exception

__all__ = [
    # Configuration
    "build_resource",
    "configure_logging",
    "start_telemetry",
    "telemetry_lifecycle",
    "TelemetryContext",
    # Errors
    "TelemetryStartupError",
    "ResourceCreationError",
    "ExporterUnreachableError",
    # Tracing
    "add_span_attributes",
    "record_exception",
    # Metrics
    "HelloMetrics",
    # Context
    "install_propagator",
    "get_current_trace_id",
]
