"""FastAPI dependencies resolving collaborators stored on app.state."""

from fastapi import Request

from container_gateway.exceptions import RuntimeUnavailableError
from container_gateway.port_allocator import PortAllocator
from container_gateway.provisioner import ContainerProvisioner


def get_provisioner(request: Request) -> ContainerProvisioner:
    """Get the provisioner built at startup.

    Raises RuntimeUnavailableError if the Docker client was never created.
    """
    provisioner = getattr(request.app.state, "provisioner", None)
    if provisioner is None:
        raise RuntimeUnavailableError("startup", "Container runtime client is not initialized")
    return provisioner


def get_allocator(request: Request) -> PortAllocator:
    return request.app.state.allocator
