"""Port exposure parsing.

Exposure strings follow the ``docker run -p`` short form:

- ``"9222"``: expose container port 9222 without a host binding.
- ``"8080:80"``: expose container port 80 and bind it on all host
  interfaces at port 8080.

Any other shape is accepted and exposed verbatim without a binding.
"""

from typing import Dict, Iterable, List, Tuple

import structlog

from ...models import ALL_INTERFACES, ExposureBinding, PortBinding

logger = structlog.get_logger(__name__)


def parse_exposure(mapping: str) -> ExposureBinding:
    """Parse one exposure string into a container port and optional binding."""
    parts = mapping.split(":")

    if len(parts) == 2:
        host_port, container_port = parts
        return ExposureBinding(
            container_port=container_port,
            host_binding=PortBinding(host_port=host_port, host_ip=ALL_INTERFACES),
        )

    if len(parts) != 1:
        logger.debug("Exposing unrecognised port mapping as-is", mapping=mapping)
    return ExposureBinding(container_port=mapping)


def parse_exposures(
    mappings: Iterable[str],
) -> Tuple[List[str], Dict[str, List[PortBinding]]]:
    """Parse exposure strings into exposed ports and host bindings.

    Returns:
        Tuple of (exposed container ports in declaration order, mapping of
        container port to its host bindings)
    """
    exposed_ports: List[str] = []
    port_bindings: Dict[str, List[PortBinding]] = {}

    for mapping in mappings:
        exposure = parse_exposure(mapping)
        if exposure.container_port not in exposed_ports:
            exposed_ports.append(exposure.container_port)
        if exposure.is_bound:
            # Last declaration wins, matching a map keyed by container port
            port_bindings[exposure.container_port] = [exposure.host_binding]

    return exposed_ports, port_bindings
