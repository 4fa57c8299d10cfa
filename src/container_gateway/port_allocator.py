"""Host port pool shared by all provisioning requests."""

import asyncio

import structlog

from container_gateway.exceptions import AllocationError, PortsExhaustedError

logger = structlog.get_logger()

DEFAULT_PORT_RANGE_START = 8000
DEFAULT_PORT_RANGE_END = 9000


class PortAllocator:
    """Hands out unique host ports from a fixed inclusive range.

    Each claimed port lives in a single slot map: ``port -> container_id``,
    where ``None`` marks a port that is reserved but not yet bound to a
    container. Reverse lookups scan the same map, so the two directions of
    the port/container relationship cannot drift apart.

    ``reserve()`` scans and claims under one lock, so concurrent provisioning
    requests never receive the same port.
    """

    def __init__(
        self,
        start: int = DEFAULT_PORT_RANGE_START,
        end: int = DEFAULT_PORT_RANGE_END,
    ):
        if start > end:
            raise ValueError(f"Empty port range: {start}-{end}")
        self.start = start
        self.end = end
        self._slots: dict[int, str | None] = {}
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self.end - self.start + 1

    @property
    def in_use(self) -> int:
        """Number of reserved or bound ports."""
        return len(self._slots)

    async def reserve(self) -> int:
        """Claim the lowest free port in the range.

        Raises:
            PortsExhaustedError: every port in the range is reserved or bound.
        """
        async with self._lock:
            for port in range(self.start, self.end + 1):
                if port not in self._slots:
                    self._slots[port] = None
                    logger.debug("port_reserved", port=port)
                    return port

        logger.warning("ports_exhausted", start=self.start, end=self.end)
        raise PortsExhaustedError()

    async def bind(self, port: int, container_id: str) -> None:
        """Commit a reserved port to the container that now owns it."""
        async with self._lock:
            if port not in self._slots:
                raise AllocationError(f"Port {port} was not reserved")
            if self._slots[port] is not None:
                raise AllocationError(
                    f"Port {port} is already bound to container {self._slots[port]}"
                )
            existing = self.port_for(container_id)
            if existing is not None:
                raise AllocationError(
                    f"Container {container_id} is already bound to port {existing}"
                )
            self._slots[port] = container_id

        logger.info("port_bound", port=port, container_id=container_id)

    async def release(self, port: int) -> None:
        """Return a reserved or bound port to the pool. No-op for free ports."""
        async with self._lock:
            container_id = self._slots.pop(port, None)

        logger.info("port_released", port=port, container_id=container_id)

    def port_for(self, container_id: str) -> int | None:
        for port, cid in self._slots.items():
            if cid == container_id:
                return port
        return None

    def assignments(self) -> dict[int, str]:
        """Snapshot of bound ports (reservations in flight are excluded)."""
        return {port: cid for port, cid in self._slots.items() if cid is not None}
