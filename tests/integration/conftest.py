"""Integration test configuration."""

from dockrun.utils.logging import setup_logging

setup_logging()
