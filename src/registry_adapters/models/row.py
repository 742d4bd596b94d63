"""Persisted container registry rows."""

from pydantic import BaseModel, Field


class ContainerRegistrySafeRow(BaseModel):
    """A stored registry without its secret columns.

    Used on read paths that must never expose credentials.
    """

    model_config = {"frozen": True}

    id: int | None = Field(default=None, description="Primary key")
    name: str = Field(description="Display name")
    registry_type: str = Field(description="Registry type tag")
    non_secret: bytes = Field(default=b"{}", description="JSON object of non-secret fields")


class ContainerRegistryRow(ContainerRegistrySafeRow):
    """A stored registry including its encrypted secret and extras blobs."""

    encrypted_secret: bytes = Field(default=b"{}", description="JSON object of encrypted secrets")
    extras: bytes = Field(default=b"{}", description="JSON object of provider extras")

    def to_safe_row(self) -> ContainerRegistrySafeRow:
        """Drop the secret columns."""
        return ContainerRegistrySafeRow(
            id=self.id,
            name=self.name,
            registry_type=self.registry_type,
            non_secret=self.non_secret,
        )
