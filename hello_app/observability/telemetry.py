"""
Explicit handle on the running telemetry pipelines.

A TelemetryContext is built once at startup by start_telemetry() and handed
to the application, which exposes it to handlers through a FastAPI
dependency instead of module-level tracer/meter globals.
"""

import logging
import threading
from contextlib import ExitStack
from dataclasses import dataclass, field

from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

from hello_app.observability.metrics import HelloMetrics

logger = logging.getLogger(__name__)


@dataclass
class TelemetryContext:
    """Providers, instrumentation handles and the resources they own."""

    resource: Resource
    tracer_provider: TracerProvider
    meter_provider: MeterProvider
    tracer: trace.Tracer
    meter: metrics.Meter
    instruments: HelloMetrics
    _exit_stack: ExitStack = field(default_factory=ExitStack, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _closed: bool = field(default=False, repr=False)

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def shutdown(self) -> None:
        """
        Flush and stop both pipelines, metrics first.

        Safe to call more than once; only the first call does any work.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._exit_stack.close()
        logger.info("OpenTelemetry shutdown complete")
