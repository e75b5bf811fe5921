"""Container lifecycle management."""

import asyncio
from typing import Any, BinaryIO, Callable, Dict, List, Optional

import structlog

from ...config import settings
from ...models import CleanupError, ContainerExitError
from ..interfaces import EngineInterface
from .probe import ExponentialBackoff, wait_until_ready

logger = structlog.get_logger(__name__)


async def run_blocking(func: Callable, *args, **kwargs):
    """Run a blocking engine call in the default executor."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, lambda: func(*args, **kwargs))


def _copy_stream(stream, sink: BinaryIO) -> int:
    """Copy a log stream into a sink until the stream ends."""
    copied = 0
    for chunk in stream:
        sink.write(chunk)
        copied += len(chunk)
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    return copied


class Runner:
    """Handle to one started container.

    A Runner is only produced by a successful ``ContainerSpec.run`` and is
    the sole owner of its container until ``kill`` or ``stop`` completes.
    The container id is fixed at creation, so concurrent use of the
    read-only operations (``logs``, ``check``, ``wait``) alongside a
    teardown needs no locking.

    Usable as an async context manager that kills and removes the
    container on exit.
    """

    def __init__(self, engine: EngineInterface, container: Dict[str, Any]):
        self._engine = engine
        self._container = container

    @property
    def id(self) -> str:
        return self._container["Id"]

    @property
    def short_id(self) -> str:
        return self.id[:12]

    @property
    def name(self) -> str:
        return self._container.get("Name", "").lstrip("/")

    @property
    def attrs(self) -> Dict[str, Any]:
        """Engine descriptor captured right after start."""
        return self._container

    def __repr__(self) -> str:
        return f"<Runner {self.short_id} name={self.name!r}>"

    async def __aenter__(self) -> "Runner":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.kill()

    async def check(
        self,
        address: str,
        timeout: Optional[float] = None,
        backoff: Optional[ExponentialBackoff] = None,
    ) -> None:
        """Block until ``address`` answers; see ``wait_until_ready``."""
        await wait_until_ready(address, timeout=timeout, backoff=backoff)

    async def logs(
        self,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[BinaryIO] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Follow the container's output into the given sinks.

        Returns when the engine closes the streams (the container exited).
        Raises ``asyncio.TimeoutError`` when ``timeout`` expires first;
        cancellation propagates. Streams are closed on every exit path and
        the copy threads are joined, so the sinks are idle on return.
        """
        channels = [
            (sink, name)
            for sink, name in ((stdout, "stdout"), (stderr, "stderr"))
            if sink is not None
        ]
        if not channels:
            raise ValueError("At least one of stdout or stderr must be given")

        streams = []
        copies = []
        try:
            for sink, name in channels:
                stream = await run_blocking(
                    self._engine.logs,
                    self.id,
                    stdout=name == "stdout",
                    stderr=name == "stderr",
                    follow=True,
                )
                streams.append((stream, sink))

            loop = asyncio.get_event_loop()
            copies = [
                loop.run_in_executor(None, _copy_stream, stream, sink)
                for stream, sink in streams
            ]
            # Shielded so a timeout leaves the copies running until joined below
            await asyncio.wait_for(
                asyncio.gather(*(asyncio.shield(copy) for copy in copies)),
                timeout=timeout,
            )
        finally:
            for stream, _ in streams:
                stream.close()
            if copies:
                # No copy may touch a sink once logs returns
                results = await asyncio.shield(
                    asyncio.gather(*copies, return_exceptions=True)
                )
                for result in results:
                    if isinstance(result, Exception):
                        logger.debug(
                            "Log copy ended with error after close",
                            container_id=self.short_id,
                            error=str(result),
                        )

    async def stdout(self, sink: BinaryIO, timeout: Optional[float] = None) -> None:
        """Follow the container's standard output into ``sink``."""
        await self.logs(stdout=sink, timeout=timeout)

    async def stderr(self, sink: BinaryIO, timeout: Optional[float] = None) -> None:
        """Follow the container's standard error into ``sink``."""
        await self.logs(stderr=sink, timeout=timeout)

    async def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the container exits.

        Raises:
            ContainerExitError: The container exited with a non-zero code.
            asyncio.TimeoutError: ``timeout`` expired first.
        """
        exit_code = await asyncio.wait_for(
            run_blocking(self._engine.wait_container, self.id), timeout=timeout
        )
        if exit_code != 0:
            logger.info("Container exited with error", container_id=self.short_id, exit_code=exit_code)
            raise ContainerExitError(exit_code, container_id=self.id)
        logger.info("Container exited", container_id=self.short_id)

    async def stop(self, kill_deadline: Optional[int] = None) -> None:
        """Stop the container gracefully, then remove it.

        Removal is attempted even when the stop fails.

        Args:
            kill_deadline: Seconds the engine waits before killing; defaults
                to ``settings.docker.stop_timeout``.

        Raises:
            CleanupError: One or both steps failed.
        """
        if kill_deadline is None:
            kill_deadline = settings.docker.stop_timeout
        await self._teardown("stop", self._engine.stop_container, self.id, kill_deadline)

    async def kill(self) -> None:
        """Kill the container immediately, then remove it.

        Removal is attempted even when the kill fails.

        Raises:
            CleanupError: One or both steps failed.
        """
        await self._teardown("kill", self._engine.kill_container, self.id)

    async def _teardown(self, action: str, func: Callable, *args) -> None:
        errors: List[Exception] = []

        try:
            await run_blocking(func, *args)
        except Exception as e:
            logger.warning(f"Failed to {action} container", container_id=self.short_id, error=str(e))
            errors.append(e)

        try:
            await run_blocking(
                self._engine.remove_container, self.id, remove_volumes=True, force=True
            )
        except Exception as e:
            logger.warning("Failed to remove container", container_id=self.short_id, error=str(e))
            errors.append(e)

        if errors:
            raise CleanupError(errors, container_id=self.id)

        logger.info("Container torn down", container_id=self.short_id, action=action)
