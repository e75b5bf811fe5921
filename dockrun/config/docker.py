"""Docker configuration."""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Docker engine settings."""

    base_url: str | None = Field(default=None, alias="docker_base_url")
    timeout: int = Field(default=60, ge=1, alias="docker_timeout")

    # Container teardown
    stop_timeout: int = Field(default=10, ge=0, alias="stop_timeout")

    # Capabilities added when a spec declares none
    default_cap_add: List[str] = Field(
        default_factory=lambda: ["SYS_ADMIN"], alias="default_cap_add"
    )

    class Config:
        env_prefix = ""
        extra = "ignore"
