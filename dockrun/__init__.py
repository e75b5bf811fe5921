"""Ephemeral Docker containers for tests.

Usage:
    from dockrun import Client

    async with Client.from_env() as client:
        spec = client.container("yukinying/chrome-headless-browser", "chromium")
        runner = await spec.expose("9222:9222").run(timeout=30)
        async with runner:
            await runner.check("http://localhost:9222", timeout=30)
            ...
"""

from ._version import __version__
from .models import (
    CleanupError,
    ContainerConfig,
    ContainerExitError,
    DockrunException,
    ExposureBinding,
    ImageNotFoundError,
    PortBinding,
    ValidationError,
)
from .services import EngineInterface
from .services.container import (
    Client,
    ContainerSpec,
    DockerEngine,
    ExponentialBackoff,
    Runner,
    parse_exposure,
    parse_exposures,
    wait_until_ready,
)

__all__ = [
    "__version__",
    "Client",
    "ContainerSpec",
    "Runner",
    "DockerEngine",
    "EngineInterface",
    "ExponentialBackoff",
    "wait_until_ready",
    "parse_exposure",
    "parse_exposures",
    "ContainerConfig",
    "ExposureBinding",
    "PortBinding",
    "DockrunException",
    "ValidationError",
    "ImageNotFoundError",
    "ContainerExitError",
    "CleanupError",
]
