"""Configuration management for dockrun.

Settings are read from the environment (prefixed with ``DOCKRUN_``) or a
``.env`` file and exposed both flat and in logical groups.

Usage:
    from dockrun.config import settings

    # Grouped access
    settings.docker.timeout
    settings.probe.initial_interval

    # Flat access
    settings.docker_timeout
    settings.probe_initial_interval
"""

from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .docker import DockerConfig
from .logging import LoggingConfig
from .probe import ProbeConfig


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Docker Configuration
    docker_base_url: str | None = Field(
        default=None,
        description="Docker daemon URL (unset = use DOCKER_HOST and friends)",
    )
    docker_timeout: int = Field(default=60, ge=1, description="Docker API timeout in seconds")
    stop_timeout: int = Field(
        default=10,
        ge=0,
        description="Seconds to wait for a graceful stop before the engine kills",
    )
    default_cap_add: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["SYS_ADMIN"],
        description="Capabilities added to containers that declare none",
    )

    # Readiness Probe Configuration
    probe_initial_interval: float = Field(default=0.5, gt=0)
    probe_multiplier: float = Field(default=1.5, ge=1.0)
    probe_randomization_factor: float = Field(default=0.5, ge=0.0, le=1.0)
    probe_max_interval: float = Field(default=60.0, gt=0)
    probe_max_elapsed_time: float | None = Field(
        default=900.0,
        gt=0,
        description="Give up probing after this many seconds (unset = never)",
    )
    probe_http_timeout: float = Field(default=5.0, gt=0, description="Per-attempt HTTP probe timeout")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("default_cap_add", mode="before")
    @classmethod
    def parse_cap_add(cls, v):
        """Accept a comma-separated capability list, as set in the environment."""
        if isinstance(v, str):
            return [cap.strip().upper() for cap in v.split(",") if cap.strip()]
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Only JSON and console rendering are supported."""
        if v.lower() not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return v.lower()

    # ========================================================================
    # GROUPED CONFIG ACCESS
    # ========================================================================

    @property
    def docker(self) -> DockerConfig:
        """Access Docker configuration group."""
        return DockerConfig(
            docker_base_url=self.docker_base_url,
            docker_timeout=self.docker_timeout,
            stop_timeout=self.stop_timeout,
            default_cap_add=list(self.default_cap_add),
        )

    @property
    def probe(self) -> ProbeConfig:
        """Access readiness probe configuration group."""
        return ProbeConfig(
            probe_initial_interval=self.probe_initial_interval,
            probe_multiplier=self.probe_multiplier,
            probe_randomization_factor=self.probe_randomization_factor,
            probe_max_interval=self.probe_max_interval,
            probe_max_elapsed_time=self.probe_max_elapsed_time,
            probe_http_timeout=self.probe_http_timeout,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(
            log_level=self.log_level,
            log_format=self.log_format,
        )


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "DockerConfig",
    "LoggingConfig",
    "ProbeConfig",
]
