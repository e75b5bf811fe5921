"""Docker engine facade built on the docker SDK."""

from typing import Any, Dict, List, Optional, Sequence

import docker
import structlog
from docker.errors import ImageNotFound

from ...config import settings
from ...models import ImageNotFoundError, PortBinding
from ..interfaces import EngineInterface

logger = structlog.get_logger(__name__)


def _port_spec(container_port: str):
    """Translate ``"53/udp"`` into the (port, proto) form the SDK expects."""
    if "/" in container_port:
        port, proto = container_port.split("/", 1)
        return (port, proto)
    return container_port


class DockerEngine(EngineInterface):
    """EngineInterface implementation over ``docker.DockerClient``.

    Uses the low-level API client so that calls map one-to-one onto the
    engine's REST operations and are keyed by container id.
    """

    def __init__(self, client: docker.DockerClient):
        self.client = client

    @classmethod
    def from_settings(cls) -> "DockerEngine":
        """Create an engine from settings, falling back to the environment."""
        config = settings.docker
        if config.base_url:
            logger.info("Connecting to Docker daemon", base_url=config.base_url)
            client = docker.DockerClient(base_url=config.base_url, timeout=config.timeout)
        else:
            logger.info("Connecting to Docker daemon from environment")
            client = docker.from_env(timeout=config.timeout)
        return cls(client)

    @property
    def api(self) -> docker.APIClient:
        return self.client.api

    def ping(self) -> bool:
        """Check the daemon answers."""
        return self.client.ping()

    def inspect_image(self, image: str) -> Dict[str, Any]:
        try:
            return self.api.inspect_image(image)
        except ImageNotFound as e:
            raise ImageNotFoundError(image) from e

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
        host_config = self.api.create_host_config(
            port_bindings={
                port: [binding.as_tuple() for binding in bindings]
                for port, bindings in port_bindings.items()
            },
            cap_add=list(cap_add) if cap_add else None,
        )
        result = self.api.create_container(
            image=image,
            command=list(command) or None,
            name=name,
            ports=[_port_spec(port) for port in exposed_ports],
            environment=environment or None,
            host_config=host_config,
        )
        for warning in result.get("Warnings") or []:
            logger.warning("Docker create warning", name=name, warning=warning)
        return result["Id"]

    def start_container(self, container_id: str) -> None:
        self.api.start(container_id)

    def inspect_container(self, container_id: str) -> Dict[str, Any]:
        return self.api.inspect_container(container_id)

    def logs(self, container_id: str, stdout: bool, stderr: bool, follow: bool = True):
        return self.api.logs(
            container_id,
            stdout=stdout,
            stderr=stderr,
            stream=True,
            follow=follow,
        )

    def wait_container(self, container_id: str, timeout: Optional[float] = None) -> int:
        result = self.api.wait(container_id, timeout=timeout)
        return int(result.get("StatusCode", -1))

    def stop_container(self, container_id: str, timeout: int) -> None:
        self.api.stop(container_id, timeout=timeout)

    def kill_container(self, container_id: str) -> None:
        self.api.kill(container_id)

    def remove_container(
        self, container_id: str, remove_volumes: bool = True, force: bool = True
    ) -> None:
        self.api.remove_container(container_id, v=remove_volumes, force=force)

    def close(self) -> None:
        """Close Docker client connection."""
        try:
            self.client.close()
        except Exception as e:
            logger.error("Error closing Docker client", error=str(e))
