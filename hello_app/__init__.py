"""hello-app: a single-endpoint service instrumented with OpenTelemetry."""

__version__ = "1.0"
