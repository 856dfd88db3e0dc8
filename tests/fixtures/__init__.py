"""Shared test fixtures."""

from tests.fixtures.otel import (
    CapturedSpan,
    CollectingMetricExporter,
    SpanCapture,
    get_metric_value,
    get_point_value,
    get_resource_attributes,
)

__all__ = [
    "CapturedSpan",
    "CollectingMetricExporter",
    "SpanCapture",
    "get_metric_value",
    "get_point_value",
    "get_resource_attributes",
]
