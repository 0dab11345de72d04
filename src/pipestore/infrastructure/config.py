"""Configuration management for the record store."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage configuration."""

    encoding: str = Field(default="utf-8", description="Text encoding of the database file")
    sync_mode: Literal["fsync", "none"] = Field(
        default="fsync", description="Whether flushed files are fsynced before rename"
    )
    reload_after_write: bool = Field(
        default=True, description="Re-parse the file after every flush"
    )


class CodecConfig(BaseModel):
    """Value codec configuration."""

    strict_numbers: bool = Field(
        default=False,
        description="Raise on unparsable int/float fields instead of decoding to NaN",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    verbose_operations: bool = Field(
        default=False, description="Log every operation with its affected rows"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="pipestore", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the record store."""

    model_config = SettingsConfigDict(
        env_prefix="PIPESTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    codec: CodecConfig = Field(default_factory=CodecConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
