"""Services module for dockrun."""

from .interfaces import EngineInterface

__all__ = ["EngineInterface"]
