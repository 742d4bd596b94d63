"""Image records produced by registry enumeration."""

from typing import Any

from pydantic import BaseModel, Field


class IngestedContainerImage(BaseModel):
    """A single tagged image discovered in a registry.

    Field aliases are the wire names consumed by the ingestion pipeline;
    dump with ``by_alias=True`` to produce them.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(alias="docker_image_id", description="Image id (digest when known)")
    node_id: str = Field(alias="node_id", description="name:tag identifier")
    name: str = Field(alias="docker_image_name", description="Fully qualified image name")
    tag: str = Field(alias="docker_image_tag", description="Image tag")
    size: str = Field(default="", alias="docker_image_size", description="Size in bytes")
    created_at: str = Field(
        default="",
        alias="docker_image_created_at",
        description="Creation or push timestamp as reported by the registry",
    )
    digest: str | None = Field(default=None, alias="docker_image_digest", description="Manifest digest")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Provider-specific extras")

    @property
    def full_reference(self) -> str:
        """Image reference with tag, or digest when pinned."""
        if self.digest:
            return f"{self.name}@{self.digest}"
        return f"{self.name}:{self.tag}"
