"""Exceptions raised while bringing up the telemetry pipelines."""


class TelemetryStartupError(Exception):
    """Base class for failures that must stop the service before it serves."""


class ResourceCreationError(TelemetryStartupError):
    """The resource descriptor could not be built from the configured attributes."""


class ExporterUnreachableError(TelemetryStartupError):
    """The OTLP endpoint did not accept a connection within the startup timeout."""

    def __init__(self, endpoint: str, timeout: float):
        self.endpoint = endpoint
        self.timeout = timeout
        super().__init__(
            f"OTLP endpoint {endpoint} not reachable within {timeout:.1f}s"
        )
