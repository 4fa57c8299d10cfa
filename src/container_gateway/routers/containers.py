"""Containers router.

Lists containers known to the runtime and provisions new ones with a host
port from the pool.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
import structlog

from ..dependencies import get_provisioner
from ..provisioner import ContainerProvisioner
from ..schemas import (
    ContainerListResponse,
    CreateContainerRequest,
    CreateContainerResponse,
    ErrorResponse,
)

logger = structlog.get_logger()

router = APIRouter(tags=["containers"])


@router.get("/", response_class=PlainTextResponse, summary="Root endpoint")
async def root() -> str:
    """Returns a message directing to the /containers endpoint."""
    return "Go to /containers to see all containers"


@router.get(
    "/containers",
    response_model=ContainerListResponse,
    summary="List all Docker containers",
    responses={500: {"model": ErrorResponse}},
)
async def list_containers(
    provisioner: ContainerProvisioner = Depends(get_provisioner),
) -> ContainerListResponse:
    """Returns every container, including stopped ones."""
    containers = await provisioner.list_containers()
    return ContainerListResponse(containers=containers)


@router.post(
    "/containers/",
    response_model=CreateContainerResponse,
    summary="Create a new Docker container",
    responses={500: {"model": ErrorResponse}},
)
@router.post("/containers", response_model=CreateContainerResponse, include_in_schema=False)
async def create_container(
    body: CreateContainerRequest,
    provisioner: ContainerProvisioner = Depends(get_provisioner),
) -> CreateContainerResponse:
    """Pulls the image and starts a container with port 80 published on a pool port."""
    result = await provisioner.provision(body.image)
    logger.info(
        "container_created",
        container_id=result.container_id,
        image=result.image,
        host_port=result.port,
    )
    return CreateContainerResponse(container=result.container_id)
