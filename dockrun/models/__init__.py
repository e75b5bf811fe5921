"""Data models for dockrun."""

from .container import ALL_INTERFACES, ContainerConfig, ExposureBinding, PortBinding
from .errors import (
    CleanupError,
    ContainerExitError,
    DockrunException,
    ErrorType,
    ImageNotFoundError,
    ValidationError,
)

__all__ = [
    "ALL_INTERFACES",
    "ContainerConfig",
    "ExposureBinding",
    "PortBinding",
    "CleanupError",
    "ContainerExitError",
    "DockrunException",
    "ErrorType",
    "ImageNotFoundError",
    "ValidationError",
]
