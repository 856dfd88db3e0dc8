"""
Context propagation utilities for OpenTelemetry.

Provides the process-wide propagator setup used by the HTTP middleware and
retrieval of the current trace ID for log lines.
"""

import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagate import set_global_textmap
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

logger = logging.getLogger(__name__)


def install_propagator() -> CompositePropagator:
    """
    Install the W3C Baggage + TraceContext propagator process-wide.

    Incoming requests with malformed headers are treated as having no
    parent; the propagators never raise on bad input.

    Returns:
        The installed propagator.
    """
    propagator = CompositePropagator([
        W3CBaggagePropagator(),
        TraceContextTextMapPropagator(),
    ])
    set_global_textmap(propagator)
    logger.debug("Installed propagators: %s", propagator.fields)
    return propagator


def get_current_trace_id() -> Optional[str]:
    """
    Get the current trace ID as a hex string.

    Returns:
        Trace ID string or None if no active span.
    """
    span = trace.get_current_span()
    if span and span.is_recording():
        span_context = span.get_span_context()
        if span_context.is_valid:
            return format(span_context.trace_id, "032x")
    return None

