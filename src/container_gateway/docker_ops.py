import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import docker
import structlog

logger = structlog.get_logger()


class DockerClientWrapper:
    """
    Async wrapper around blocking docker-py client.
    Abstracts Docker operations to allow mocking and non-blocking execution.
    """

    def __init__(self, max_workers: int = 5):
        self._client = docker.from_env()
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

    async def _run(self, func, *args, **kwargs):
        """Run blocking function in thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, lambda: func(*args, **kwargs))

    async def list_containers(self, all: bool = False) -> list[dict[str, Any]]:
        """List container summaries as reported by the engine.

        Uses the low-level API so each entry keeps the raw ``Id``, ``Names``,
        ``Image`` and ``State`` keys without an inspect call per container.
        """
        return await self._run(self._client.api.containers, all=all)

    async def pull_image(self, image: str) -> Any:
        """Pull an image. Untagged names resolve to ``latest``."""
        logger.info("pulling_image", image=image)
        return await self._run(self._client.images.pull, image)

    async def create_container(
        self,
        image: str,
        command: list[str],
        ports: dict[str, int],
        tty: bool = True,
    ) -> Any:
        """Create (but do not start) a container.

        Args:
            image: Image reference to create from
            command: Entry command, e.g. ["sh"]
            ports: Container port spec -> host port, e.g. {"80/tcp": 8000}
            tty: Allocate a pseudo-TTY

        Returns:
            docker-py Container object
        """
        # Not detached, so the engine attaches stdout/stderr
        return await self._run(
            self._client.containers.create,
            image,
            command=command,
            ports=ports,
            tty=tty,
        )

    async def start_container(self, container: Any) -> None:
        """Start a created container."""
        await self._run(container.start)

    async def remove_container(self, container_id: str, force: bool = False) -> None:
        """Remove a container."""
        try:
            container = await self._run(self._client.containers.get, container_id)
            await self._run(container.remove, force=force)
        except docker.errors.NotFound:
            pass

    def close(self) -> None:
        """Release the SDK session and worker threads."""
        self._executor.shutdown(wait=False)
        self._client.close()
