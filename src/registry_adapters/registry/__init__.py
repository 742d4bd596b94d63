"""Container registry adapters."""

from registry_adapters.registry.base import BaseRegistry, FieldGroup, Registry, decode_blob
from registry_adapters.registry.acr import RegistryACR
from registry_adapters.registry.dockerhub import RegistryDockerHub
from registry_adapters.registry.dockerprivate import RegistryDockerPrivate
from registry_adapters.registry.ecr import RegistryECR
from registry_adapters.registry.gcr import RegistryGCR
from registry_adapters.registry.harbor import RegistryHarbor
from registry_adapters.registry.jfrog import RegistryJfrog
from registry_adapters.registry.quay import RegistryQuay
from registry_adapters.registry.factory import (
    RegistryFactory,
    get_default_factory,
    get_registry,
    get_registry_with_registry_row,
    get_registry_with_registry_safe_row,
)

__all__ = [
    "BaseRegistry",
    "FieldGroup",
    "Registry",
    "decode_blob",
    "RegistryACR",
    "RegistryDockerHub",
    "RegistryDockerPrivate",
    "RegistryECR",
    "RegistryGCR",
    "RegistryHarbor",
    "RegistryJfrog",
    "RegistryQuay",
    "RegistryFactory",
    "get_default_factory",
    "get_registry",
    "get_registry_with_registry_row",
    "get_registry_with_registry_safe_row",
]
