"""
Metrics definitions for hello-app.

Defines the manual execution counter and the callback-driven heap
memory instrument using the OpenTelemetry Meter API.
"""

import logging
from typing import Iterable, Optional

import psutil
from opentelemetry import metrics
from opentelemetry.metrics import CallbackOptions, Observation

logger = logging.getLogger(__name__)

# Meter name
METER_NAME = "io.opentelemetry.metrics.hello"

_METRIC_PREFIX = "custom.metric."

NUMBER_OF_EXEC_NAME = _METRIC_PREFIX + "number.of.exec"
NUMBER_OF_EXEC_DESC = "Count the number of executions."
HEAP_MEMORY_NAME = _METRIC_PREFIX + "heap.memory"
HEAP_MEMORY_DESC = "Reports heap memory utilization."

# Every data point of an instrument carries the same attribute set
NUMBER_OF_EXEC_ATTRIBUTES = {NUMBER_OF_EXEC_NAME: NUMBER_OF_EXEC_DESC}
HEAP_MEMORY_ATTRIBUTES = {HEAP_MEMORY_NAME: HEAP_MEMORY_DESC}


def read_heap_bytes(process: Optional[psutil.Process] = None) -> int:
    """Resident memory of the process in bytes, as reported by the OS."""
    if process is None:
        process = psutil.Process()
    return process.memory_info().rss


class HelloMetrics:
    """
    Instruments registered on a single meter.

    Created once per telemetry context; the counter is shared by every
    request and relies on the SDK's synchronized aggregation for
    concurrent increments.
    """

    def __init__(self, meter: metrics.Meter, process: Optional[psutil.Process] = None):
        self._process = process if process is not None else psutil.Process()
        self.number_of_executions: metrics.Counter = meter.create_counter(
            name=NUMBER_OF_EXEC_NAME,
            description=NUMBER_OF_EXEC_DESC,
            unit="1",
        )
        self.heap_memory: metrics.ObservableGauge = meter.create_observable_gauge(
            name=HEAP_MEMORY_NAME,
            callbacks=[self.observe_heap_memory],
            description=HEAP_MEMORY_DESC,
            unit="By",
        )

    def observe_heap_memory(self, options: CallbackOptions) -> Iterable[Observation]:
        """Collection callback for the heap memory instrument."""
        yield Observation(read_heap_bytes(self._process), HEAP_MEMORY_ATTRIBUTES)

    def record_execution(self) -> None:
        """Add one execution. Never raises: a broken meter must not fail the request."""
        try:
            self.number_of_executions.add(1, NUMBER_OF_EXEC_ATTRIBUTES)
        except Exception as e:
            logger.warning("Failed to record %s: %s", NUMBER_OF_EXEC_NAME, e)
