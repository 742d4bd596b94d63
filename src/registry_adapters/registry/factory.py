"""Construction of registry handles from payloads and stored rows."""

from __future__ import annotations

from typing import Iterator

from registry_adapters.models.common import RegistryType
from registry_adapters.models.row import ContainerRegistryRow, ContainerRegistrySafeRow
from registry_adapters.registry.acr import RegistryACR
from registry_adapters.registry.base import BaseRegistry
from registry_adapters.registry.dockerhub import RegistryDockerHub
from registry_adapters.registry.dockerprivate import RegistryDockerPrivate
from registry_adapters.registry.ecr import RegistryECR
from registry_adapters.registry.gcr import RegistryGCR
from registry_adapters.registry.harbor import RegistryHarbor
from registry_adapters.registry.jfrog import RegistryJfrog
from registry_adapters.registry.quay import RegistryQuay
from registry_adapters.utils.errors import UnsupportedRegistryTypeError
from registry_adapters.utils.logging import get_logger

logger = get_logger("registry.factory")

BUILTIN_REGISTRIES: tuple[type[BaseRegistry], ...] = (
    RegistryDockerHub,
    RegistryQuay,
    RegistryGCR,
    RegistryACR,
    RegistryDockerPrivate,
    RegistryHarbor,
    RegistryJfrog,
    RegistryECR,
)


class RegistryFactory:
    """Maps registry type tags to adapter classes.

    Every construction path resolves the tag here, so an unknown tag
    fails the same way whether it came from a request or a stored row.

    Example:
        factory = RegistryFactory()
        factory.register(RegistryDockerHub)

        registry = factory.from_payload("docker_hub", request_body)
        registry = factory.from_row(row)
    """

    def __init__(self) -> None:
        """Initialize an empty factory."""
        self._registries: dict[str, type[BaseRegistry]] = {}

    def register(self, registry_cls: type[BaseRegistry]) -> None:
        """Register an adapter class under its REGISTRY_TYPE.

        Raises:
            ValueError: If the tag is already registered
        """
        tag = str(registry_cls.REGISTRY_TYPE)
        if tag in self._registries:
            raise ValueError(f"Registry type '{tag}' is already registered")
        self._registries[tag] = registry_cls

    def unregister(self, registry_type: str) -> None:
        """Unregister an adapter class.

        Raises:
            KeyError: If the tag is not registered
        """
        if registry_type not in self._registries:
            raise KeyError(f"No registry type '{registry_type}' is registered")
        del self._registries[registry_type]

    def get(self, registry_type: str) -> type[BaseRegistry] | None:
        return self._registries.get(str(registry_type))

    def resolve(self, registry_type: str) -> type[BaseRegistry]:
        """Get the adapter class for a tag.

        Raises:
            UnsupportedRegistryTypeError: If the tag is not registered
        """
        registry_cls = self.get(registry_type)
        if registry_cls is None:
            raise UnsupportedRegistryTypeError(str(registry_type))
        return registry_cls

    def __contains__(self, registry_type: str) -> bool:
        return str(registry_type) in self._registries

    def __iter__(self) -> Iterator[type[BaseRegistry]]:
        return iter(self._registries.values())

    def __len__(self) -> int:
        return len(self._registries)

    @property
    def names(self) -> list[str]:
        """Registered type tags."""
        return list(self._registries.keys())

    def from_payload(self, registry_type: str | RegistryType, payload: bytes | str) -> BaseRegistry:
        registry_cls = self.resolve(registry_type)
        logger.debug(f"Building {registry_type} registry from payload")
        return registry_cls.from_payload(payload)

    def from_row(self, row: ContainerRegistryRow) -> BaseRegistry:
        registry_cls = self.resolve(row.registry_type)
        logger.debug(f"Building {row.registry_type} registry from row {row.id}")
        return registry_cls.from_row(row)

    def from_safe_row(self, row: ContainerRegistrySafeRow) -> BaseRegistry:
        registry_cls = self.resolve(row.registry_type)
        logger.debug(f"Building {row.registry_type} registry from safe row {row.id}")
        return registry_cls.from_safe_row(row)


def _build_default_factory() -> RegistryFactory:
    factory = RegistryFactory()
    for registry_cls in BUILTIN_REGISTRIES:
        factory.register(registry_cls)
    return factory


# Global default factory, built at import
_default_factory = _build_default_factory()


def get_default_factory() -> RegistryFactory:
    """Get the process-wide factory holding the built-in adapters."""
    return _default_factory


def get_registry(registry_type: str | RegistryType, payload: bytes | str) -> BaseRegistry:
    """Build a registry handle from a create/update request body.

    Args:
        registry_type: Registry type tag, e.g. ``"docker_hub"``
        payload: JSON body in the provider's shape:
            ``{"name", "non_secret": {...}, "secret": {...}, "extras": {...}}``

    Returns:
        The registry handle with plaintext secrets

    Raises:
        UnsupportedRegistryTypeError: If the tag is unknown
        DeserializationError: If the payload is malformed
    """
    return get_default_factory().from_payload(registry_type, payload)


def get_registry_with_registry_row(row: ContainerRegistryRow) -> BaseRegistry:
    """Build a registry handle from a stored row, secrets included.

    The secret and extras sets are still encrypted; call
    ``decrypt_secret``/``decrypt_extras`` before using credentials.
    Absent keys in the stored blobs become empty strings.

    Raises:
        UnsupportedRegistryTypeError: If the row's tag is unknown
        DeserializationError: If any blob cannot be decoded
    """
    return get_default_factory().from_row(row)


def get_registry_with_registry_safe_row(row: ContainerRegistrySafeRow) -> BaseRegistry:
    """Build a registry handle from a redacted row; the secret set stays empty.

    Raises:
        UnsupportedRegistryTypeError: If the row's tag is unknown
        DeserializationError: If the non-secret blob cannot be decoded
    """
    return get_default_factory().from_safe_row(row)
