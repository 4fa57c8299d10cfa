"""Request and response schemas for the containers API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateContainerRequest(BaseModel):
    """Request to provision a container from an image."""

    model_config = ConfigDict(extra="forbid")

    image: str = Field(
        ...,
        min_length=1,
        description="Image reference to pull and run",
        examples=["nginx"],
    )


class CreateContainerResponse(BaseModel):
    """Identifier of the started container."""

    container: str


class ContainerSummary(BaseModel):
    """Minimal view of a container known to the runtime."""

    id: str
    name: str | None = None
    image: str
    status: str  # created, running, exited, ... as reported by the engine

    @classmethod
    def from_engine(cls, summary: dict[str, Any]) -> "ContainerSummary":
        """Project a raw engine listing entry."""
        names = summary.get("Names") or []
        return cls(
            id=summary["Id"],
            name=names[0] if names else None,
            image=summary.get("Image", ""),
            status=summary.get("State", ""),
        )


class ContainerListResponse(BaseModel):
    containers: list[ContainerSummary]


class ErrorResponse(BaseModel):
    error: str
