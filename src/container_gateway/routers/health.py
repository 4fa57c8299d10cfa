"""Health check router."""

from fastapi import APIRouter, Depends

from ..dependencies import get_allocator
from ..port_allocator import PortAllocator

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(allocator: PortAllocator = Depends(get_allocator)) -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "ports_in_use": allocator.in_use,
        "ports_bound": len(allocator.assignments()),
        "ports_total": allocator.capacity,
    }
