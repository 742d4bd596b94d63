"""Common model types shared across modules."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RegistryType(str, Enum):
    """Registry type tags, as stored in the registry_type column."""

    DOCKER_HUB = "docker_hub"
    QUAY = "quay"
    GCR = "google_container_registry"
    ACR = "azure_container_registry"
    DOCKER_PRIVATE = "docker_private_registry"
    HARBOR = "harbor"
    JFROG = "jfrog_container_registry"
    ECR = "amazon_ecr"

    def __str__(self) -> str:
        return self.value


class ErrorInfo(BaseModel):
    """Serializable description of an error raised by an adapter or client."""

    model_config = {"frozen": True}

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional error context",
    )

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
