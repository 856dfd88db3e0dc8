"""
Command line entry point.

    EXPORTER_ENDPOINT=localhost:4317 python -m hello_app

Telemetry is started before the HTTP server; any startup failure is fatal
and the port is never bound.
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from hello_app.main import create_app
from hello_app.observability import TelemetryStartupError, configure_logging, telemetry_lifecycle
from hello_app.settings import Settings, get_settings

logger = logging.getLogger("hello_app")


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        logging.basicConfig()
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)


def serve(settings: Settings) -> None:
    """Start telemetry, then serve until uvicorn receives SIGINT/SIGTERM."""
    with telemetry_lifecycle(settings) as telemetry:
        app = create_app(telemetry, settings=settings)
        uvicorn.run(
            app,
            host=settings.http_host,
            port=settings.http_port,
            log_config=None,
        )


def main() -> None:
    settings = _load_settings()
    configure_logging(settings)

    try:
        serve(settings)
    except TelemetryStartupError as e:
        logger.critical("Failed to start: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
