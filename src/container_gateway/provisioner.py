"""Container provisioning: image pull, port reservation, create, start."""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

from container_gateway.docker_ops import DockerClientWrapper
from container_gateway.exceptions import (
    ImageAcquisitionError,
    RuntimeUnavailableError,
)
from container_gateway.port_allocator import PortAllocator
from container_gateway.schemas import ContainerSummary

logger = structlog.get_logger()


class ProvisioningStage(str, Enum):
    """Provisioning lifecycle, in order."""

    REQUESTED = "requested"
    IMAGE_PULLED = "image_pulled"
    PORT_RESERVED = "port_reserved"
    CREATED = "created"
    STARTED = "started"


@dataclass
class ProvisionResult:
    container_id: str
    port: int
    image: str


@dataclass
class _Attempt:
    image: str
    stage: ProvisioningStage = ProvisioningStage.REQUESTED
    port: int | None = None
    container_id: str | None = None

    def advance(self, stage: ProvisioningStage) -> None:
        self.stage = stage
        logger.debug("provisioning_stage", image=self.image, stage=stage.value)


def _error_message(exc: Exception) -> str:
    # docker.errors.APIError keeps the engine's own message in .explanation
    return getattr(exc, "explanation", None) or str(exc) or type(exc).__name__


class ContainerProvisioner:
    """
    Turns an image name into a running container with a host port.
    Rolls back port reservations and created containers when a later step fails.
    """

    def __init__(
        self,
        docker_client: DockerClientWrapper,
        allocator: PortAllocator,
        container_port: int = 80,
        command: list[str] | None = None,
    ):
        self.docker = docker_client
        self.allocator = allocator
        self.container_port = container_port
        self.command = command or ["sh"]

    async def provision(self, image: str) -> ProvisionResult:
        """
        Pull, reserve, create, bind and start.

        Raises:
            ImageAcquisitionError: pull failed; nothing was reserved or created.
            PortsExhaustedError: pool is full; nothing was created.
            RuntimeUnavailableError: create or start failed; the port was
                released and any created container removed.

        Cancellation during create or start rolls back the same way.
        """
        attempt = _Attempt(image=image)
        logger.info("provisioning_container", image=image)

        try:
            await self.docker.pull_image(image)
        except Exception as e:
            logger.error("image_pull_failed", image=image, error=str(e))
            raise ImageAcquisitionError(image, _error_message(e)) from e
        attempt.advance(ProvisioningStage.IMAGE_PULLED)

        # PortsExhaustedError propagates as-is
        attempt.port = await self.allocator.reserve()
        attempt.advance(ProvisioningStage.PORT_RESERVED)

        try:
            container = await self.docker.create_container(
                image,
                command=self.command,
                ports={f"{self.container_port}/tcp": attempt.port},
                tty=True,
            )
            attempt.container_id = container.id
            attempt.advance(ProvisioningStage.CREATED)

            await self.allocator.bind(attempt.port, container.id)
            await self.docker.start_container(container)
            attempt.advance(ProvisioningStage.STARTED)
        except asyncio.CancelledError:
            logger.warning(
                "provisioning_cancelled",
                image=image,
                reached_stage=attempt.stage.value,
                port=attempt.port,
                container_id=attempt.container_id,
            )
            await asyncio.shield(self._compensate(attempt))
            raise
        except Exception as e:
            reached = attempt.stage
            logger.error(
                "provisioning_failed",
                image=image,
                reached_stage=reached.value,
                port=attempt.port,
                container_id=attempt.container_id,
                error=str(e),
            )
            await self._compensate(attempt)
            raise RuntimeUnavailableError(reached.value, _error_message(e)) from e

        logger.info(
            "container_provisioned",
            image=image,
            container_id=attempt.container_id,
            port=attempt.port,
        )
        return ProvisionResult(container_id=attempt.container_id, port=attempt.port, image=image)

    async def list_containers(self) -> list[ContainerSummary]:
        """List every container, running or not, in engine order."""
        try:
            summaries = await self.docker.list_containers(all=True)
        except Exception as e:
            logger.error("container_listing_failed", error=str(e))
            raise RuntimeUnavailableError("list", _error_message(e)) from e
        return [ContainerSummary.from_engine(s) for s in summaries]

    async def _compensate(self, attempt: _Attempt) -> None:
        """Undo a partially completed attempt. Never raises."""
        if attempt.container_id is not None:
            try:
                await self.docker.remove_container(attempt.container_id, force=True)
                logger.info("orphan_container_removed", container_id=attempt.container_id)
            except Exception as e:
                logger.error(
                    "orphan_container_removal_failed",
                    container_id=attempt.container_id,
                    error=str(e),
                )

        if attempt.port is not None:
            await self.allocator.release(attempt.port)
