"""Registry API clients used to validate credentials and list images."""

from registry_adapters.clients.base import (
    HTTPRegistryClient,
    RegistryAuth,
    RegistryClient,
    build_ingested_image,
)
from registry_adapters.clients.dockerhub import DockerHubClient
from registry_adapters.clients.ecr import ECRClient
from registry_adapters.clients.harbor import HarborClient
from registry_adapters.clients.oci import OCIRegistryClient
from registry_adapters.clients.quay import QuayClient

__all__ = [
    "HTTPRegistryClient",
    "RegistryAuth",
    "RegistryClient",
    "build_ingested_image",
    "DockerHubClient",
    "ECRClient",
    "HarborClient",
    "OCIRegistryClient",
    "QuayClient",
]
