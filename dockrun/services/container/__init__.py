"""Container lifecycle services.

This package is split into:
- engine.py: Docker engine facade
- ports.py: Port exposure parsing
- probe.py: Readiness probing with exponential backoff
- spec.py: Fluent container specification
- runner.py: Started-container lifecycle and teardown
- client.py: Entry point tying the above to one engine
"""

from .client import Client
from .engine import DockerEngine
from .ports import parse_exposure, parse_exposures
from .probe import ExponentialBackoff, wait_until_ready
from .runner import Runner
from .spec import ContainerSpec

__all__ = [
    "Client",
    "DockerEngine",
    "parse_exposure",
    "parse_exposures",
    "ExponentialBackoff",
    "wait_until_ready",
    "Runner",
    "ContainerSpec",
]
