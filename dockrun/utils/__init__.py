"""Utility modules for dockrun."""

from .logging import setup_logging

__all__ = ["setup_logging"]
