"""Readiness probing with exponential backoff.

A probe is a single attempt to reach an endpoint inside a freshly started
container. ``wait_until_ready`` repeats probes, sleeping between attempts
according to an ``ExponentialBackoff`` policy, until one succeeds or the
caller's deadline expires.
"""

import asyncio
import random
import socket
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

import httpx
import structlog

from ...config import settings

logger = structlog.get_logger(__name__)

HTTP_SCHEMES = ("http", "https")
STREAM_SCHEMES = {
    "tcp": socket.AF_UNSPEC,
    "tcp4": socket.AF_INET,
    "tcp6": socket.AF_INET6,
}
DATAGRAM_SCHEMES = {
    "udp": socket.AF_UNSPEC,
    "udp4": socket.AF_INET,
    "udp6": socket.AF_INET6,
}


class ExponentialBackoff:
    """Randomised exponential backoff bounded by elapsed time.

    Each call to ``next_backoff`` returns the current interval randomised by
    ``randomization_factor`` and then grows the interval by ``multiplier``
    up to ``max_interval``. Once ``max_elapsed_time`` seconds have passed
    since the last ``reset`` it returns ``None`` to signal that retrying
    should stop.
    """

    def __init__(
        self,
        initial_interval: float = 0.5,
        multiplier: float = 1.5,
        randomization_factor: float = 0.5,
        max_interval: float = 60.0,
        max_elapsed_time: Optional[float] = 900.0,
    ):
        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.randomization_factor = randomization_factor
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.reset()

    @classmethod
    def from_settings(cls) -> "ExponentialBackoff":
        probe = settings.probe
        return cls(
            initial_interval=probe.initial_interval,
            multiplier=probe.multiplier,
            randomization_factor=probe.randomization_factor,
            max_interval=probe.max_interval,
            max_elapsed_time=probe.max_elapsed_time,
        )

    def reset(self) -> None:
        self.current_interval = self.initial_interval
        self._start_time = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time

    def next_backoff(self) -> Optional[float]:
        """Return the next delay in seconds, or None when exhausted."""
        if self.max_elapsed_time is not None and self.elapsed > self.max_elapsed_time:
            return None

        delta = self.randomization_factor * self.current_interval
        delay = random.uniform(self.current_interval - delta, self.current_interval + delta)

        if self.current_interval >= self.max_interval / self.multiplier:
            self.current_interval = self.max_interval
        else:
            self.current_interval *= self.multiplier

        return delay


@dataclass(frozen=True)
class ProbeTarget:
    """A parsed probe address."""

    scheme: str
    url: str
    host: Optional[str] = None
    port: Optional[int] = None
    path: Optional[str] = None


def parse_address(address: str) -> ProbeTarget:
    """Parse a probe address such as ``http://localhost:9222`` or ``tcp://db:5432``."""
    parts = urlsplit(address)
    scheme = parts.scheme.lower()

    if scheme in HTTP_SCHEMES:
        if not parts.hostname:
            raise ValueError(f"Probe address has no host: {address}")
        return ProbeTarget(scheme=scheme, url=address)

    if scheme == "unix":
        if not parts.path:
            raise ValueError(f"Probe address has no socket path: {address}")
        return ProbeTarget(scheme=scheme, url=address, path=parts.path)

    if scheme in STREAM_SCHEMES or scheme in DATAGRAM_SCHEMES:
        if not parts.hostname or parts.port is None:
            raise ValueError(f"Probe address needs host and port: {address}")
        return ProbeTarget(
            scheme=scheme, url=address, host=parts.hostname, port=parts.port
        )

    raise ValueError(f"Unsupported probe scheme '{parts.scheme}' in {address}")


async def _probe_http(client: httpx.AsyncClient, target: ProbeTarget) -> bool:
    try:
        # Headers are enough; the body is never read or decoded
        async with client.stream("GET", target.url) as response:
            status_code = response.status_code
    except httpx.RequestError as e:
        logger.debug("HTTP probe failed", url=target.url, error=str(e))
        return False
    # Any status code means the service is answering
    logger.debug("HTTP probe answered", url=target.url, status_code=status_code)
    return True


async def _probe_stream(target: ProbeTarget) -> bool:
    try:
        if target.scheme == "unix":
            _, writer = await asyncio.open_unix_connection(target.path)
        else:
            _, writer = await asyncio.open_connection(
                target.host, target.port, family=STREAM_SCHEMES[target.scheme]
            )
    except OSError as e:
        logger.debug("Connection probe failed", address=target.url, error=str(e))
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except ConnectionError as e:
        logger.debug("Probe connection closed uncleanly", address=target.url, error=str(e))
    return True


async def _probe_datagram(target: ProbeTarget) -> bool:
    loop = asyncio.get_event_loop()
    try:
        transport, _ = await loop.create_datagram_endpoint(
            asyncio.DatagramProtocol,
            remote_addr=(target.host, target.port),
            family=DATAGRAM_SCHEMES[target.scheme],
        )
    except OSError as e:
        logger.debug("Datagram probe failed", address=target.url, error=str(e))
        return False
    transport.close()
    return True


async def _poll(
    target: ProbeTarget,
    backoff: ExponentialBackoff,
    client: Optional[httpx.AsyncClient],
) -> int:
    attempts = 0
    while True:
        attempts += 1
        if target.scheme in HTTP_SCHEMES:
            ready = await _probe_http(client, target)
        elif target.scheme in DATAGRAM_SCHEMES:
            ready = await _probe_datagram(target)
        else:
            ready = await _probe_stream(target)

        if ready:
            return attempts

        delay = backoff.next_backoff()
        if delay is None:
            raise asyncio.TimeoutError(
                f"{target.url} not reachable after {backoff.elapsed:.1f}s"
            )
        await asyncio.sleep(delay)


async def wait_until_ready(
    address: str,
    timeout: Optional[float] = None,
    backoff: Optional[ExponentialBackoff] = None,
) -> None:
    """Block until ``address`` is reachable.

    Args:
        address: URL-like endpoint. ``http``/``https`` addresses are probed
            with a GET (any response counts, request errors such as a
            redirect loop are retried); ``tcp``, ``tcp4``, ``tcp6``,
            ``udp*`` and ``unix`` addresses with a plain connection.
        timeout: Overall deadline in seconds; ``None`` waits until the
            backoff policy gives up.
        backoff: Retry policy; defaults to one built from settings.

    Raises:
        ValueError: The address cannot be probed.
        asyncio.TimeoutError: The deadline expired or the backoff policy
            was exhausted before a probe succeeded.
    """
    target = parse_address(address)
    policy = backoff or ExponentialBackoff.from_settings()
    policy.reset()

    async def run() -> int:
        if target.scheme not in HTTP_SCHEMES:
            return await _poll(target, policy, None)
        async with httpx.AsyncClient(
            timeout=settings.probe_http_timeout, follow_redirects=True
        ) as client:
            return await _poll(target, policy, client)

    try:
        attempts = await asyncio.wait_for(run(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "Endpoint not ready before deadline",
            address=address,
            timeout=timeout,
            elapsed_seconds=round(policy.elapsed, 2),
        )
        raise

    logger.info(
        "Endpoint ready",
        address=address,
        attempts=attempts,
        elapsed_seconds=round(policy.elapsed, 2),
    )
