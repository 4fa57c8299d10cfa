"""Errors raised by the provisioning core.

Every error carries a human-readable ``message`` that the HTTP layer returns
as ``{"error": message}``.
"""


class ContainerGatewayError(Exception):
    """Base class for failures reported to API clients."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ImageAcquisitionError(ContainerGatewayError):
    """Image pull failed (bad name, registry unreachable, auth failure)."""

    def __init__(self, image: str, message: str):
        super().__init__(message)
        self.image = image


class PortsExhaustedError(ContainerGatewayError):
    """Every port in the pool is reserved or bound."""

    def __init__(self, message: str = "No available ports"):
        super().__init__(message)


class RuntimeUnavailableError(ContainerGatewayError):
    """Container runtime call failed outside of image acquisition.

    ``stage`` is the last provisioning stage reached, or ``"list"``.
    """

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage


class AllocationError(ContainerGatewayError):
    """Allocator used out of protocol (bind without reserve, double bind)."""
