"""Service interfaces for dockrun."""

# Standard library imports
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

# Local application imports
from ..models import PortBinding


class EngineInterface(ABC):
    """Interface for the container engine.

    All operations are blocking and keyed by container identifier. The
    orchestrator offloads them to an executor so callers can cancel or
    time out the awaiting task.
    """

    @abstractmethod
    def inspect_image(self, image: str) -> Dict[str, Any]:
        """Inspect an image; raises ImageNotFoundError when it is absent."""
        pass

    @abstractmethod
    def create_container(
        self,
        name: str,
        image: str,
        command: Sequence[str],
        exposed_ports: Sequence[str],
        port_bindings: Dict[str, List[PortBinding]],
        environment: Optional[Dict[str, str]] = None,
        cap_add: Optional[Sequence[str]] = None,
    ) -> str:
        """Create a container and return its identifier."""
        pass

    @abstractmethod
    def start_container(self, container_id: str) -> None:
        """Start a created container."""
        pass

    @abstractmethod
    def inspect_container(self, container_id: str) -> Dict[str, Any]:
        """Return the container's full descriptor."""
        pass

    @abstractmethod
    def logs(
        self, container_id: str, stdout: bool, stderr: bool, follow: bool = True
    ):
        """Open a log stream for the selected channels.

        The returned object yields raw byte chunks and has a ``close()``
        method that unblocks a reader in another thread.
        """
        pass

    @abstractmethod
    def wait_container(self, container_id: str, timeout: Optional[float] = None) -> int:
        """Block until the container exits and return its exit code."""
        pass

    @abstractmethod
    def stop_container(self, container_id: str, timeout: int) -> None:
        """Request a graceful stop, killing after ``timeout`` seconds."""
        pass

    @abstractmethod
    def kill_container(self, container_id: str) -> None:
        """Request immediate termination."""
        pass

    @abstractmethod
    def remove_container(
        self, container_id: str, remove_volumes: bool = True, force: bool = True
    ) -> None:
        """Remove a container."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the engine connection."""
        pass
