"""
OpenTelemetry SDK configuration and initialization.

Builds the resource, the trace and metric pipelines exporting over OTLP/gRPC,
and installs the process-wide propagator. start_telemetry() assembles the
pieces in order and hands back a TelemetryContext that owns them.
"""

import logging
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

import grpc
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    MetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from hello_app.observability.context import install_propagator
from hello_app.observability.errors import (
    ExporterUnreachableError,
    ResourceCreationError,
    TelemetryStartupError,
)
from hello_app.observability.metrics import METER_NAME, HelloMetrics
from hello_app.observability.telemetry import TelemetryContext
from hello_app.observability.tracing import TRACER_NAME
from hello_app.settings import Settings

logger = logging.getLogger(__name__)


def build_resource(settings: Settings) -> Resource:
    """
    Build the resource attached to every span and metric point.

    Raises:
        ResourceCreationError: If the service attributes are unusable.
    """
    if not settings.service_name.strip():
        raise ResourceCreationError("service name must not be empty")

    try:
        return Resource.create({
            SERVICE_NAME: settings.service_name,
            SERVICE_VERSION: settings.service_version,
        })
    except Exception as e:
        raise ResourceCreationError(f"failed to create resource: {e}") from e


def wait_for_endpoint(endpoint: str, timeout: float) -> None:
    """
    Block until the OTLP gRPC endpoint accepts a connection.

    Raises:
        ExporterUnreachableError: If the channel is not ready within timeout.
    """
    channel = grpc.insecure_channel(endpoint)
    try:
        grpc.channel_ready_future(channel).result(timeout=timeout)
    except grpc.FutureTimeoutError as e:
        raise ExporterUnreachableError(endpoint, timeout) from e
    finally:
        channel.close()
    logger.debug("OTLP endpoint %s is reachable", endpoint)


def create_span_exporter(settings: Settings) -> SpanExporter:
    """Insecure OTLP/gRPC span exporter for the configured endpoint."""
    return OTLPSpanExporter(endpoint=settings.exporter_endpoint, insecure=True)


def create_metric_exporter(settings: Settings) -> MetricExporter:
    """Insecure OTLP/gRPC metric exporter for the configured endpoint."""
    return OTLPMetricExporter(endpoint=settings.exporter_endpoint, insecure=True)


def build_tracer_provider(
    resource: Resource,
    span_exporter: SpanExporter,
    settings: Settings,
) -> TracerProvider:
    """Always-sample tracer provider batching finished spans to the exporter."""
    tracer_provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
    tracer_provider.add_span_processor(BatchSpanProcessor(
        span_exporter,
        max_queue_size=settings.span_max_queue_size,
        schedule_delay_millis=settings.span_schedule_delay_ms,
        max_export_batch_size=settings.span_max_export_batch_size,
        export_timeout_millis=settings.span_export_timeout_ms,
    ))
    return tracer_provider


def create_metric_reader(metric_exporter: MetricExporter, settings: Settings) -> MetricReader:
    """Reader that collects and pushes every collection period."""
    return PeriodicExportingMetricReader(
        metric_exporter,
        export_interval_millis=settings.metrics_collect_period_ms,
    )


def build_meter_provider(resource: Resource, metric_reader: MetricReader) -> MeterProvider:
    """Meter provider tagging every point with the shared resource."""
    return MeterProvider(resource=resource, metric_readers=[metric_reader])


def start_telemetry(
    settings: Settings,
    *,
    span_exporter: Optional[SpanExporter] = None,
    metric_exporter: Optional[MetricExporter] = None,
    metric_reader: Optional[MetricReader] = None,
    wait_for_exporter: bool = True,
) -> TelemetryContext:
    """
    Bring up the trace and metric pipelines.

    Order: resource, trace pipeline, propagator, endpoint check, metric
    pipeline, instruments. Every pipeline is registered for shutdown as soon
    as it exists, so a failure at a later step releases the earlier ones
    before the error propagates.

    Args:
        settings: Application settings.
        span_exporter: Exporter for finished spans. Defaults to OTLP/gRPC.
        metric_exporter: Exporter for metric points. Defaults to OTLP/gRPC.
        metric_reader: Reader to use instead of a periodic one built around
            metric_exporter.
        wait_for_exporter: Check the OTLP endpoint accepts connections before
            starting the metric pipeline.

    Returns:
        TelemetryContext owning both pipelines.

    Raises:
        TelemetryStartupError: On any construction or connection failure.
    """
    try:
        with ExitStack() as stack:
            resource = build_resource(settings)

            if span_exporter is None:
                span_exporter = create_span_exporter(settings)
            tracer_provider = build_tracer_provider(resource, span_exporter, settings)
            stack.callback(tracer_provider.shutdown)

            install_propagator()

            if wait_for_exporter:
                wait_for_endpoint(
                    settings.exporter_endpoint, settings.exporter_connect_timeout_s
                )

            if metric_reader is None:
                if metric_exporter is None:
                    metric_exporter = create_metric_exporter(settings)
                metric_reader = create_metric_reader(metric_exporter, settings)
            meter_provider = build_meter_provider(resource, metric_reader)
            stack.callback(meter_provider.shutdown)

            tracer = tracer_provider.get_tracer(TRACER_NAME)
            meter = meter_provider.get_meter(METER_NAME)
            instruments = HelloMetrics(meter)

            telemetry = TelemetryContext(
                resource=resource,
                tracer_provider=tracer_provider,
                meter_provider=meter_provider,
                tracer=tracer,
                meter=meter,
                instruments=instruments,
                _exit_stack=stack.pop_all(),
            )
    except TelemetryStartupError:
        raise
    except Exception as e:
        raise TelemetryStartupError(f"telemetry startup failed: {e}") from e

    logger.info(
        "OpenTelemetry initialized: service=%s, version=%s, endpoint=%s, collect_period=%dms",
        settings.service_name,
        settings.service_version,
        settings.exporter_endpoint,
        settings.metrics_collect_period_ms,
    )
    return telemetry


@contextmanager
def telemetry_lifecycle(settings: Settings, **kwargs) -> Iterator[TelemetryContext]:
    """
    Scoped start/stop of the telemetry pipelines.

    Keyword arguments are passed through to start_telemetry().
    """
    telemetry = start_telemetry(settings, **kwargs)
    try:
        yield telemetry
    finally:
        telemetry.shutdown()


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """
    Configure the root logger.

    With log correlation on, LoggingInstrumentor injects otelTraceID and
    otelSpanID into every record and installs its own format.
    """
    if settings.otel_log_correlation:
        instrumentor = LoggingInstrumentor()
        if not instrumentor.is_instrumented_by_opentelemetry:
            instrumentor.instrument(set_logging_format=True)
    else:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)
    logger.debug(
        "Logging configured: level=%s, correlation=%s",
        settings.log_level,
        settings.otel_log_correlation,
    )
