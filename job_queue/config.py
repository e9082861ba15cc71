"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from job_queue.constants import (
    DEFAULT_CONCURRENCY_LIMIT,
    DEFAULT_QUEUE_NAME,
    DEFAULT_RATE_WINDOW_SECONDS,
    DEFAULT_TIMEOUT_LIMIT_SECONDS,
)


class Settings(BaseSettings):
    """Queue settings loaded from JOB_QUEUE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JOB_QUEUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Admission limits
    concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT
    rate_limit: int | None = None  # job starts per window, None = unlimited
    timeout_limit: float = DEFAULT_TIMEOUT_LIMIT_SECONDS
    rate_window: float = DEFAULT_RATE_WINDOW_SECONDS

    queue_name: str = DEFAULT_QUEUE_NAME

    # Observability
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"
    otel_service_name: str = "job-queue"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
