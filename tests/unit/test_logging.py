"""Unit tests for logging setup."""

import logging
from unittest.mock import patch

import structlog

from dockrun.utils.logging import add_library_context, setup_logging


class TestLoggingSetup:
    """Tests for structlog configuration."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_json_renderer(self):
        """Test JSON output is selected by configuration."""
        with patch("dockrun.utils.logging.settings") as mock_settings:
            mock_settings.logging.level = "DEBUG"
            mock_settings.logging.format = "json"
            setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer(self):
        """Test console output is the alternative."""
        with patch("dockrun.utils.logging.settings") as mock_settings:
            mock_settings.logging.level = "INFO"
            mock_settings.logging.format = "console"
            setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_third_party_loggers_quieted(self):
        """Test noisy client libraries are raised to WARNING."""
        with patch("dockrun.utils.logging.settings") as mock_settings:
            mock_settings.logging.level = "DEBUG"
            mock_settings.logging.format = "json"
            setup_logging()

        assert logging.getLogger("docker").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_library_context(self):
        """Test entries are tagged with the library name and version."""
        event = add_library_context(None, "info", {"event": "Started container"})

        assert event["library"] == "dockrun"
        assert "version" in event
