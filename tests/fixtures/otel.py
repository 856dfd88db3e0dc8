"""
Shared OpenTelemetry test fixtures and utilities.

Provides span capture, metric reading, and helper functions for verifying
telemetry without requiring an external collector.

Telemetry under test is always built with injected in-memory exporters, so
nothing here touches the global tracer or meter providers.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from opentelemetry.sdk.metrics.export import (
    HistogramDataPoint,
    InMemoryMetricReader,
    MetricExporter,
    MetricExportResult,
    MetricsData,
    NumberDataPoint,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


@dataclass
class CapturedSpan:
    """Simplified span representation for test assertions.

    Attributes:
        name: The span name (e.g., "buildResponse", "GET /hello")
        kind: Span kind name ("SERVER", "INTERNAL", ...)
        trace_id: 32-character hex trace ID
        span_id: 16-character hex span ID
        parent_span_id: Parent span ID if this is a child span, None otherwise
        start_time: Start timestamp in nanoseconds
        end_time: End timestamp in nanoseconds
        attributes: Dict of span attributes
        status_code: Span status ("OK", "ERROR", "UNSET")
        events: List of span events with name and attributes
    """

    name: str
    kind: str
    trace_id: str
    span_id: str
    parent_span_id: Optional[str]
    start_time: int
    end_time: int
    attributes: Dict
    status_code: str
    events: List[Dict]


class SpanCapture:
    """Collects spans for test verification.

    Usage:
        capture = SpanCapture()
        telemetry = start_telemetry(settings, span_exporter=capture.exporter, ...)
        capture.bind(telemetry.tracer_provider)

        # ... run code that creates spans ...

        spans = capture.get_spans()
        assert spans[0].name == "buildResponse"
    """

    def __init__(self) -> None:
        self.exporter = InMemorySpanExporter()
        self._provider: Optional[TracerProvider] = None

    def bind(self, provider: TracerProvider) -> None:
        """Flush this provider's batch processor before reading spans."""
        self._provider = provider

    def get_spans(self) -> List[CapturedSpan]:
        """Return all captured spans."""
        if self._provider is not None:
            self._provider.force_flush()
        return [
            CapturedSpan(
                name=span.name,
                kind=span.kind.name,
                trace_id=format(span.context.trace_id, "032x"),
                span_id=format(span.context.span_id, "016x"),
                parent_span_id=(
                    format(span.parent.span_id, "016x") if span.parent else None
                ),
                start_time=span.start_time,
                end_time=span.end_time,
                attributes=dict(span.attributes) if span.attributes else {},
                status_code=span.status.status_code.name,
                events=[
                    {"name": e.name, "attributes": dict(e.attributes) if e.attributes else {}}
                    for e in span.events
                ],
            )
            for span in self.exporter.get_finished_spans()
        ]

    def get_spans_by_name(self, name: str) -> List[CapturedSpan]:
        """Filter spans by name."""
        return [s for s in self.get_spans() if s.name == name]

    def get_server_spans(self) -> List[CapturedSpan]:
        """Spans opened by the HTTP middleware."""
        return [s for s in self.get_spans() if s.kind == "SERVER"]

    def get_children_of(self, parent_span_id: str) -> List[CapturedSpan]:
        """Get all spans that are children of the given parent."""
        return [s for s in self.get_spans() if s.parent_span_id == parent_span_id]

    def get_span_tree(self, root_name: str) -> Dict:
        """Build span hierarchy tree for assertion.

        Returns a nested dict structure like:
        {
            "name": "GET /hello",
            "children": [
                {"name": "buildResponse", "children": []},
                {"name": "mySpan", "children": []}
            ]
        }
        """
        spans = self.get_spans()
        root = next((s for s in spans if s.name == root_name), None)
        if not root:
            return {}

        def build_children(parent_span_id: str) -> List[Dict]:
            children = [s for s in spans if s.parent_span_id == parent_span_id]
            return [
                {"name": c.name, "children": build_children(c.span_id)} for c in children
            ]

        return {"name": root.name, "children": build_children(root.span_id)}

    def clear(self) -> None:
        """Clear captured spans between tests."""
        self.exporter.clear()


class CollectingMetricExporter(MetricExporter):
    """Metric exporter that keeps every batch it is handed."""

    def __init__(self) -> None:
        super().__init__()
        self.exported: List[MetricsData] = []
        self.shutdown_called = False

    def export(self, metrics_data: MetricsData, timeout_millis: float = 10_000, **kwargs) -> MetricExportResult:
        self.exported.append(metrics_data)
        return MetricExportResult.SUCCESS

    def force_flush(self, timeout_millis: float = 10_000) -> bool:
        return True

    def shutdown(self, timeout_millis: float = 30_000, **kwargs) -> None:
        self.shutdown_called = True


def _find_point(data: Optional[MetricsData], name: str, labels: Optional[Dict[str, str]]):
    if not data:
        return None

    for resource_metric in data.resource_metrics:
        for scope_metric in resource_metric.scope_metrics:
            for metric in scope_metric.metrics:
                if metric.name == name:
                    for point in metric.data.data_points:
                        if labels:
                            point_labels = dict(point.attributes)
                            if not all(
                                point_labels.get(k) == v for k, v in labels.items()
                            ):
                                continue
                        return point
    return None


def get_point_value(
    data: Optional[MetricsData],
    name: str,
    labels: Optional[Dict[str, str]] = None,
) -> Optional[float]:
    """Get a metric value out of an already collected MetricsData batch."""
    point = _find_point(data, name, labels)
    if isinstance(point, NumberDataPoint):
        return point.value
    if isinstance(point, HistogramDataPoint):
        return point.sum
    return None


def get_metric_value(
    reader: InMemoryMetricReader,
    name: str,
    labels: Optional[Dict[str, str]] = None,
) -> Optional[float]:
    """Get metric value from reader, optionally filtered by labels.

    Args:
        reader: InMemoryMetricReader instance
        name: Metric name to look up
        labels: Optional dict of label key-value pairs to filter by

    Returns:
        The metric value (counter value or histogram sum), or None if not found
    """
    return get_point_value(reader.get_metrics_data(), name, labels)


def get_resource_attributes(data: Optional[MetricsData]) -> Dict:
    """Resource attributes of the first resource in a batch."""
    if not data or not data.resource_metrics:
        return {}
    return dict(data.resource_metrics[0].resource.attributes)
