"""registry-adapters: credential and metadata adapters for container registries.

This package turns a registry type tag plus either a request payload or
a stored database row into a typed registry handle that can:

- **Validate credentials** against the registry's API
- **Encrypt and decrypt secrets** with a pluggable symmetric cipher
- **Enumerate images** available in the registry

Supported registries: Docker Hub, Quay, Google Container Registry,
Azure Container Registry, Harbor, JFrog Artifactory, Amazon ECR and any
self-hosted Docker/OCI registry.

Usage:
    from registry_adapters import FernetCipher, get_registry, get_registry_with_registry_row

    # Create flow: request body -> encrypted row
    registry = get_registry("docker_hub", request_body)
    if registry.is_valid_credential():
        registry.encrypt_secret(cipher)
        row = registry.to_row()

    # Read flow: stored row -> images
    registry = get_registry_with_registry_row(row)
    registry.decrypt_secret(cipher)
    images = registry.fetch_images_from_registry()

CLI:
    registry-adapters types
    registry-adapters validate --type <type> --payload <file>
    registry-adapters images --type <type> --payload <file>
    registry-adapters encrypt --type <type> --payload <file>
"""

__version__ = "0.1.0"

# Construction
from registry_adapters.registry.factory import (
    RegistryFactory,
    get_default_factory,
    get_registry,
    get_registry_with_registry_row,
    get_registry_with_registry_safe_row,
)
from registry_adapters.registry.base import BaseRegistry, Registry

# Models
from registry_adapters.models.common import ErrorInfo, RegistryType
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.models.row import ContainerRegistryRow, ContainerRegistrySafeRow

# Encryption
from registry_adapters.utils.encryption import FernetCipher, SecretCipher

# Errors
from registry_adapters.utils.errors import (
    DeserializationError,
    EncryptionError,
    RegistryAdapterError,
    UnsupportedRegistryTypeError,
)

__all__ = [
    # Version
    "__version__",
    # Construction
    "RegistryFactory",
    "get_default_factory",
    "get_registry",
    "get_registry_with_registry_row",
    "get_registry_with_registry_safe_row",
    "BaseRegistry",
    "Registry",
    # Models
    "ErrorInfo",
    "RegistryType",
    "IngestedContainerImage",
    "ContainerRegistryRow",
    "ContainerRegistrySafeRow",
    # Encryption
    "FernetCipher",
    "SecretCipher",
    # Errors
    "DeserializationError",
    "EncryptionError",
    "RegistryAdapterError",
    "UnsupportedRegistryTypeError",
]
