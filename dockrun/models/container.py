"""Data models for container configuration.

These models describe what the engine is asked to create; they carry no
engine state themselves.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

ALL_INTERFACES = "0.0.0.0"


@dataclass(frozen=True)
class PortBinding:
    """A host-side binding for an exposed container port."""

    host_port: str
    host_ip: str = ALL_INTERFACES

    def as_tuple(self) -> Tuple[str, str]:
        return (self.host_ip, self.host_port)


@dataclass(frozen=True)
class ExposureBinding:
    """A container port with zero or one host binding.

    Derived from an exposure string such as ``"9222"`` or ``"8080:80"``.
    """

    container_port: str
    host_binding: Optional[PortBinding] = None

    @property
    def is_bound(self) -> bool:
        return self.host_binding is not None


@dataclass(frozen=True)
class ContainerConfig:
    """Finalised, immutable description of a container to create."""

    image: str
    name: str
    command: Tuple[str, ...] = ()
    exposed_ports: Tuple[str, ...] = ()
    port_bindings: Dict[str, List[PortBinding]] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    cap_add: Tuple[str, ...] = ()
