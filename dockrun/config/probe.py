"""Readiness probe configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ProbeConfig(BaseSettings):
    """Exponential backoff settings for readiness probes."""

    initial_interval: float = Field(default=0.5, gt=0, alias="probe_initial_interval")
    multiplier: float = Field(default=1.5, ge=1.0, alias="probe_multiplier")
    randomization_factor: float = Field(
        default=0.5, ge=0.0, le=1.0, alias="probe_randomization_factor"
    )
    max_interval: float = Field(default=60.0, gt=0, alias="probe_max_interval")
    max_elapsed_time: float | None = Field(
        default=900.0, gt=0, alias="probe_max_elapsed_time"
    )
    http_timeout: float = Field(default=5.0, gt=0, alias="probe_http_timeout")

    class Config:
        env_prefix = ""
        extra = "ignore"
