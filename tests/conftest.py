"""Shared fixtures: an in-memory Docker engine double and app clients."""

import asyncio
import uuid

import docker
from httpx import ASGITransport, AsyncClient
import pytest

from container_gateway.config import Settings
from container_gateway.main import create_app
from container_gateway.port_allocator import PortAllocator


class FakeContainer:
    def __init__(self, container_id: str):
        self.id = container_id


class FakeDockerClient:
    """Implements the DockerClientWrapper surface against in-memory state."""

    def __init__(self, rejected_images: set[str] | None = None):
        self.rejected_images = rejected_images or set()
        self.containers: dict[str, dict] = {}
        self.created: list[dict] = []
        self.pulled: list[str] = []
        self.removed: list[str] = []
        self.fail_start = False
        self.fail_list = False

    async def list_containers(self, all: bool = False) -> list[dict]:
        await asyncio.sleep(0)
        if self.fail_list:
            raise docker.errors.DockerException("Error while fetching server API version")
        return [
            summary
            for summary in self.containers.values()
            if all or summary["State"] == "running"
        ]

    async def pull_image(self, image: str) -> None:
        await asyncio.sleep(0)
        if image in self.rejected_images:
            raise docker.errors.ImageNotFound(
                "404 Client Error",
                explanation=f"pull access denied for {image.split(':')[0]}, "
                "repository does not exist",
            )
        self.pulled.append(image)

    async def create_container(self, image, command, ports, tty=True) -> FakeContainer:
        await asyncio.sleep(0)
        container_id = uuid.uuid4().hex * 2
        self.created.append({"image": image, "command": command, "ports": ports, "tty": tty})
        self.containers[container_id] = {
            "Id": container_id,
            "Names": [f"/container-{container_id[:6]}"],
            "Image": image,
            "State": "created",
        }
        return FakeContainer(container_id)

    async def start_container(self, container: FakeContainer) -> None:
        await asyncio.sleep(0)
        if self.fail_start:
            raise docker.errors.APIError(
                "500 Server Error", explanation="driver failed programming external connectivity"
            )
        self.containers[container.id]["State"] = "running"

    async def remove_container(self, container_id: str, force: bool = False) -> None:
        self.removed.append(container_id)
        self.containers.pop(container_id, None)


@pytest.fixture
def fake_docker() -> FakeDockerClient:
    return FakeDockerClient(rejected_images={"this-image-does-not-exist:latest"})


@pytest.fixture
def allocator() -> PortAllocator:
    return PortAllocator()


@pytest.fixture
def app(fake_docker, allocator):
    return create_app(docker_client=fake_docker, allocator=allocator, settings=Settings())


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
