"""
FastAPI dependency providers for hello-app.

The telemetry context lives on the application state; handlers receive it
through get_telemetry() rather than importing module-level globals.
"""

from fastapi import Request

from hello_app.observability import TelemetryContext


def get_telemetry(request: Request) -> TelemetryContext:
    """
    Get the telemetry context the application was created with.

    Returns:
        TelemetryContext: Tracer, meter and instruments for this process
    """
    return request.app.state.telemetry
