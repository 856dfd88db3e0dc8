"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application
instances around an already started TelemetryContext. Building telemetry
first keeps the HTTP port closed until the exporters are known to work.

Usage:
    from hello_app.main import create_app
    from hello_app.observability import start_telemetry

    telemetry = start_telemetry(settings)
    app = create_app(telemetry, settings=settings)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from hello_app import __version__
from hello_app.observability import TelemetryContext
from hello_app.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    telemetry: TelemetryContext,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        telemetry: Running telemetry pipelines used by the middleware and handlers.
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="hello-app",
        description="Single endpoint service instrumented with OpenTelemetry",
        version=__version__,
        lifespan=_lifespan,
    )

    # Store on app state for dependency access
    app.state.settings = settings
    app.state.telemetry = telemetry

    _include_routers(app)
    _instrument(app, telemetry)

    return app


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from hello_app.api.routers import hello_router

    # Hello router (/hello)
    app.include_router(hello_router)


def _instrument(app: FastAPI, telemetry: TelemetryContext) -> None:
    """Wrap the app in the OpenTelemetry ASGI middleware."""
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=telemetry.tracer_provider,
        meter_provider=telemetry.meter_provider,
        exclude_spans=["receive", "send"],
    )


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(
        "%s %s accepting requests",
        settings.service_name,
        settings.service_version,
    )
    yield
    # Final metric collection and span flush, off the event loop
    await asyncio.to_thread(app.state.telemetry.shutdown)
    logger.info("%s shutdown complete", settings.service_name)
