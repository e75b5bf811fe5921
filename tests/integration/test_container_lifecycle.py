"""Integration tests against a real Docker daemon.

Run with ``pytest -m integration``; skipped when no daemon is reachable.
"""

import asyncio
import io
import socket
import uuid

import docker
import pytest
from docker.errors import DockerException, ImageNotFound, NotFound

from dockrun import CleanupError, Client, ContainerExitError, ImageNotFoundError

IMAGE = "nginx:alpine"

pytestmark = pytest.mark.integration


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def unique_name(prefix: str) -> str:
    return f"dockrun-{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture(scope="module")
def docker_client():
    """Real Docker client; skips the module when no daemon answers."""
    try:
        client = docker.from_env()
        client.ping()
    except DockerException as e:
        pytest.skip(f"Docker not available: {e}")

    try:
        client.images.get(IMAGE)
    except ImageNotFound:
        client.images.pull(IMAGE)

    yield client
    client.close()


@pytest.fixture
def client(docker_client):
    client = Client.from_env()
    yield client
    client.close()


class TestContainerLifecycle:
    """End-to-end lifecycle against the daemon."""

    @pytest.mark.asyncio
    async def test_run_check_kill(self, client, docker_client):
        """Test a web server becomes reachable and is removed on kill."""
        port = free_port()
        runner = await client.container(IMAGE, unique_name("web")).expose(f"{port}:80").run(timeout=30)

        async with runner:
            await runner.check(f"http://127.0.0.1:{port}", timeout=30)

        with pytest.raises(NotFound):
            docker_client.containers.get(runner.id)

    @pytest.mark.asyncio
    async def test_check_times_out_when_nothing_listens(self, client):
        """Test probing an unbound port ends with a timeout."""
        runner = await client.container(IMAGE, unique_name("idle")).expose("80").run(timeout=30)

        async with runner:
            with pytest.raises(asyncio.TimeoutError):
                await runner.check(f"tcp://127.0.0.1:{free_port()}", timeout=1)

    @pytest.mark.asyncio
    async def test_logs_and_exit_code(self, client):
        """Test output is streamed and a non-zero exit is reported."""
        spec = client.container(IMAGE, unique_name("exit"))
        runner = await spec.run("sh", "-c", "echo hello; echo oops >&2; exit 7", timeout=30)

        stdout, stderr = io.BytesIO(), io.BytesIO()
        try:
            await runner.logs(stdout=stdout, stderr=stderr, timeout=30)
            with pytest.raises(ContainerExitError) as exc_info:
                await runner.wait(timeout=30)
        finally:
            await runner.stop(1)

        assert exc_info.value.exit_code == 7
        assert b"hello" in stdout.getvalue()
        assert b"oops" in stderr.getvalue()

    @pytest.mark.asyncio
    async def test_stop_twice_reports_not_found(self, client):
        """Test a second teardown aggregates the engine's not-found errors."""
        runner = await client.container(IMAGE, unique_name("twice")).run(timeout=30)
        await runner.stop(1)

        with pytest.raises(CleanupError) as exc_info:
            await runner.stop(1)

        assert len(exc_info.value) == 2

    @pytest.mark.asyncio
    async def test_missing_image(self, client, docker_client):
        """Test a missing image creates nothing."""
        name = unique_name("missing")

        with pytest.raises(ImageNotFoundError):
            await client.container("dockrun/does-not-exist:never", name).run()

        assert docker_client.containers.list(all=True, filters={"name": name}) == []
