import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from hello_app.main import create_app
from hello_app.observability import start_telemetry
from hello_app.settings import Settings
from tests.fixtures.otel import SpanCapture
from tests.fixtures.settings import make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def span_capture() -> SpanCapture:
    capture = SpanCapture()
    yield capture
    capture.clear()


@pytest.fixture
def metric_reader() -> InMemoryMetricReader:
    """InMemoryMetricReader for verifying metric recording."""
    return InMemoryMetricReader()


@pytest.fixture
def telemetry(settings, span_capture, metric_reader):
    """Telemetry pipelines wired to in-memory exporters, no endpoint check."""
    telemetry = start_telemetry(
        settings,
        span_exporter=span_capture.exporter,
        metric_reader=metric_reader,
        wait_for_exporter=False,
    )
    span_capture.bind(telemetry.tracer_provider)
    yield telemetry
    telemetry.shutdown()


@pytest.fixture
def app(telemetry, settings):
    return create_app(telemetry, settings=settings)


@pytest.fixture
def api_client(app) -> TestClient:
    # Lifespan is not run; the telemetry fixture owns shutdown
    return TestClient(app)
