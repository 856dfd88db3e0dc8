"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from hello_app.settings import get_settings, Settings

    settings = get_settings()
    print(settings.exporter_endpoint)

    # Tests build settings explicitly and skip the .env file
    settings = Settings(_env_file=None, exporter_endpoint="localhost:4317")
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # OTLP Exporter
    # -------------------------------------------------------------------------
    exporter_endpoint: str = Field(
        description="host:port of the OTLP gRPC receiver (collector or backend)",
    )
    exporter_connect_timeout_s: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for the OTLP endpoint to accept a connection at startup",
    )

    # -------------------------------------------------------------------------
    # Resource
    # -------------------------------------------------------------------------
    service_name: str = Field(
        default="hello-app",
        description="Value of the service.name resource attribute",
    )
    service_version: str = Field(
        default="1.0",
        description="Value of the service.version resource attribute",
    )

    # -------------------------------------------------------------------------
    # HTTP Server
    # -------------------------------------------------------------------------
    http_host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    http_port: int = Field(
        default=8888,
        ge=1,
        le=65535,
        description="Port the HTTP server binds to",
    )

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------
    metrics_collect_period_ms: int = Field(
        default=5000,
        gt=0,
        description="Interval between metric collections pushed to the exporter",
    )

    # -------------------------------------------------------------------------
    # Span batching
    # -------------------------------------------------------------------------
    span_max_queue_size: int = Field(
        default=2048,
        gt=0,
        description="Finished spans buffered before the queue-full policy applies",
    )
    span_max_export_batch_size: int = Field(
        default=512,
        gt=0,
        description="Spans sent per export call",
    )
    span_schedule_delay_ms: int = Field(
        default=5000,
        gt=0,
        description="Delay between two consecutive batch exports",
    )
    span_export_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Upper bound for a single export, also used when flushing on shutdown",
    )
    span_queue_full_policy: str = Field(
        default="drop",
        description="What happens to finished spans when the queue is full",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    otel_log_correlation: bool = Field(
        default=True,
        description="Inject trace and span ids into log records",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("exporter_endpoint")
    @classmethod
    def validate_exporter_endpoint(cls, v: str) -> str:
        """Require a non-empty host:port pair."""
        v = v.strip()
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(
                f"Invalid exporter endpoint '{v}'. Expected host:port"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level '{v}'")
        return level

    @field_validator("span_queue_full_policy")
    @classmethod
    def validate_queue_full_policy(cls, v: str) -> str:
        """Ensure the queue-full policy is supported."""
        if v.lower() != "drop":
            raise ValueError(
                f"Invalid span queue full policy '{v}'. Must be: drop"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def metrics_collect_period_s(self) -> float:
        """Collection period in seconds."""
        return self.metrics_collect_period_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
