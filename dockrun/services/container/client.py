"""Entry point for declaring containers."""

from ..interfaces import EngineInterface
from .engine import DockerEngine
from .spec import ContainerSpec


class Client:
    """Creates container specs against one engine.

    The engine handle is shared read-only by every spec and runner created
    from this client.
    """

    def __init__(self, engine: EngineInterface):
        self._engine = engine

    @classmethod
    def from_env(cls) -> "Client":
        """Connect to the Docker daemon described by settings or the environment."""
        return cls(DockerEngine.from_settings())

    @property
    def engine(self) -> EngineInterface:
        return self._engine

    def container(self, image: str, name: str) -> ContainerSpec:
        """Declare a new container; nothing is created until ``run``."""
        return ContainerSpec(self._engine, image, name)

    def close(self) -> None:
        self._engine.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
