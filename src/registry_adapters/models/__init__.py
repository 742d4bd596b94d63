"""Data models for registry-adapters."""

from registry_adapters.models.common import ErrorInfo, RegistryType
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.models.row import ContainerRegistryRow, ContainerRegistrySafeRow

__all__ = [
    "ErrorInfo",
    "RegistryType",
    "IngestedContainerImage",
    "ContainerRegistryRow",
    "ContainerRegistrySafeRow",
]
