"""Centralized configuration for tfidf-engine using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Settings(BaseSettings):
    """Typed configuration loaded from ``TFIDF_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TFIDF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs instead of plain text")

    # Indexing
    default_analyzer: str = Field(default="default", description="Analyzer used to tokenize documents")
    input_encoding: str = Field(default="utf-8", description="Encoding used when reading document files")

    # Tracing
    tracing_enabled: bool = Field(default=False, description="Install an OpenTelemetry tracer provider at startup")
    service_name: str = Field(default="tfidf-engine", description="Service name reported on spans")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return normalized
