"""Fluent container specification."""

import asyncio
from typing import Dict, List, Optional

import structlog

from ...config import settings
from ...models import ContainerConfig, ValidationError
from ..interfaces import EngineInterface
from .ports import parse_exposures
from .runner import Runner, run_blocking

logger = structlog.get_logger(__name__)


class ContainerSpec:
    """Declarative description of a container, finalised by ``run``.

    Configuration calls mutate the spec and return it, so a container can be
    declared in one expression::

        runner = await client.container("redis:7", "cache").expose("6379:6379").run()

    Nothing touches the engine until ``run``.
    """

    def __init__(self, engine: EngineInterface, image: str, name: str):
        self._engine = engine
        self.image = image
        self.name = name
        self.exposures: List[str] = []
        self.environment: Dict[str, str] = {}
        self.capabilities: List[str] = []

    def __repr__(self) -> str:
        return f"<ContainerSpec {self.name!r} image={self.image!r} exposures={self.exposures}>"

    def expose(self, mapping: str) -> "ContainerSpec":
        """Expose a port: ``"9222"`` or ``"hostPort:containerPort"``."""
        self.exposures.append(mapping)
        return self

    def env(self, key: str, value: str) -> "ContainerSpec":
        """Set an environment variable in the container."""
        self.environment[key] = value
        return self

    def cap_add(self, *capabilities: str) -> "ContainerSpec":
        """Add kernel capabilities; replaces the configured default."""
        self.capabilities.extend(capabilities)
        return self

    def build(self, *command: str) -> ContainerConfig:
        """Validate the spec and freeze it into a ``ContainerConfig``."""
        if not self.image or not self.image.strip():
            raise ValidationError("Container image must not be empty")
        if not self.name or not self.name.strip():
            raise ValidationError("Container name must not be empty")

        exposed_ports, port_bindings = parse_exposures(self.exposures)
        return ContainerConfig(
            image=self.image,
            name=self.name,
            command=tuple(command),
            exposed_ports=tuple(exposed_ports),
            port_bindings=port_bindings,
            environment=dict(self.environment),
            cap_add=tuple(self.capabilities or settings.docker.default_cap_add),
        )

    async def run(self, *command: str, timeout: Optional[float] = None) -> Runner:
        """Create and start the container.

        Steps run in order and the first failure aborts with the underlying
        error. A container that was created before the failure is removed
        again, so a failed ``run`` leaves nothing behind.

        Args:
            command: Command arguments; the image default when empty.
            timeout: Seconds allowed for the container to start.

        Raises:
            ValidationError: The spec is incomplete.
            ImageNotFoundError: The image is not present in the engine.
            asyncio.TimeoutError: Start did not complete within ``timeout``.
        """
        config = self.build(*command)

        await run_blocking(self._engine.inspect_image, config.image)

        container_id = await run_blocking(
            self._engine.create_container,
            name=config.name,
            image=config.image,
            command=config.command,
            exposed_ports=config.exposed_ports,
            port_bindings=config.port_bindings,
            environment=config.environment,
            cap_add=config.cap_add,
        )
        logger.info(
            "Created container",
            container_id=container_id[:12],
            name=config.name,
            image=config.image,
        )

        try:
            await asyncio.wait_for(
                run_blocking(self._engine.start_container, container_id), timeout=timeout
            )
            descriptor = await run_blocking(self._engine.inspect_container, container_id)
        except (Exception, asyncio.CancelledError):
            await self._discard(container_id)
            raise

        logger.info(
            "Started container",
            container_id=container_id[:12],
            name=config.name,
            exposures=list(self.exposures),
        )
        return Runner(self._engine, descriptor)

    async def _discard(self, container_id: str) -> None:
        try:
            await run_blocking(
                self._engine.remove_container, container_id, remove_volumes=True, force=True
            )
        except Exception as e:
            logger.error(
                "Failed to remove container after failed start",
                container_id=container_id[:12],
                error=str(e),
            )
