"""Pytest configuration and shared fixtures."""

import threading
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from dockrun.services.container import Client
from dockrun.services.interfaces import EngineInterface

CONTAINER_ID = "4f1c2b7e9a3d5c6b8e0f1a2b3c4d5e6f7a8b9c0d1e2f3a4b5c6d7e8f9a0b1c2d"


class FakeLogStream:
    """Stand-in for the SDK's cancellable log stream.

    Yields the given chunks, then either ends or, with ``block=True``,
    blocks like a follow-mode stream until ``close`` is called.
    """

    def __init__(self, chunks: Optional[List[bytes]] = None, block: bool = False):
        self.chunks = list(chunks or [])
        self.block = block
        self.closed = False
        self._closed_event = threading.Event()

    def __iter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.block:
            self._closed_event.wait(timeout=5)

    def close(self):
        self.closed = True
        self._closed_event.set()


@pytest.fixture
def fake_log_stream():
    """Factory for fake follow-mode log streams."""
    return FakeLogStream


@pytest.fixture
def container_id():
    """Identifier the mock engine assigns."""
    return CONTAINER_ID


@pytest.fixture
def container_descriptor():
    """Descriptor the engine returns after start."""
    return {
        "Id": CONTAINER_ID,
        "Name": "/chromium",
        "State": {"Status": "running", "Running": True},
        "Config": {"Image": "yukinying/chrome-headless-browser:latest"},
    }


@pytest.fixture
def mock_engine(container_descriptor):
    """Mock engine for testing."""
    engine = MagicMock(spec=EngineInterface)

    engine.inspect_image.return_value = {"Id": "sha256:deadbeef"}
    engine.create_container.return_value = CONTAINER_ID
    engine.start_container.return_value = None
    engine.inspect_container.return_value = container_descriptor
    engine.wait_container.return_value = 0
    engine.stop_container.return_value = None
    engine.kill_container.return_value = None
    engine.remove_container.return_value = None
    engine.logs.return_value = FakeLogStream()

    return engine


@pytest.fixture
def client(mock_engine):
    """Client bound to the mock engine."""
    return Client(mock_engine)
