"""Configuration management for the table store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Snapshot storage configuration."""

    data_dir: Path = Field(default=Path("data"), description="Data directory path")
    snapshot_file: str = Field(
        default="tables.json", min_length=1, description="Snapshot file name inside data_dir"
    )
    atomic_writes: bool = Field(
        default=True, description="Write snapshots via temporary file and rename"
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP API port")
    metrics_enabled: bool = Field(default=False, description="Expose Prometheus metrics")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    base_url: str = Field(default="http://localhost:3000", description="API base URL")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="tablestore", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the table store."""

    model_config = SettingsConfigDict(
        env_prefix="TABLESTORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def snapshot_path(self) -> Path:
        """Full path of the snapshot file."""
        return self.storage.data_dir / self.storage.snapshot_file

    def ensure_directories(self) -> None:
        """Ensure the data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
