"""Unit tests for the Client entry point."""

from unittest.mock import patch

import pytest

from dockrun.services.container import Client, ContainerSpec


class TestClient:
    """Tests for Client."""

    def test_container_returns_independent_specs(self, client, mock_engine):
        """Test every call declares a fresh spec on the shared engine."""
        first = client.container("redis:7", "cache")
        second = client.container("redis:7", "cache-2")

        assert isinstance(first, ContainerSpec)
        assert first is not second
        first.expose("6379:6379")
        assert second.exposures == []
        assert client.engine is mock_engine

    def test_from_env(self):
        """Test the default client connects through DockerEngine."""
        with patch("dockrun.services.container.client.DockerEngine.from_settings") as mock_factory:
            client = Client.from_env()

        assert client.engine is mock_factory.return_value

    @pytest.mark.asyncio
    async def test_context_manager_closes_engine(self, client, mock_engine):
        """Test leaving the context releases the engine handle."""
        async with client as entered:
            assert entered is client

        mock_engine.close.assert_called_once()
