"""Container gateway configuration with pydantic-settings.

All fields have defaults suitable for local development, so the service
starts without any environment set up.

Usage:
    from container_gateway.config import get_settings

    settings = get_settings()
    settings.port_range_start  # 8000
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    service_name: str = Field(
        default="container-gateway",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # HTTP listener
    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=3000, ge=1, le=65535)

    # Host port pool handed out to containers (inclusive)
    port_range_start: int = Field(default=8000, ge=1, le=65535)
    port_range_end: int = Field(default=9000, ge=1, le=65535)

    # Container template
    container_port: int = Field(
        default=80,
        ge=1,
        le=65535,
        description="Port inside the container bound to the allocated host port",
    )
    container_command: str = "sh"

    # Thread pool for the blocking docker SDK
    docker_max_workers: int = Field(default=5, ge=1)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @model_validator(mode="after")
    def validate_port_range(self) -> "Settings":
        if self.port_range_start > self.port_range_end:
            raise ValueError(
                f"port_range_start ({self.port_range_start}) must not exceed "
                f"port_range_end ({self.port_range_end})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
