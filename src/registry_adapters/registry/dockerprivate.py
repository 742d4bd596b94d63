"""Self-hosted Docker registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.oci import OCIRegistryClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class DockerPrivateNonSecret(FieldGroup):
    docker_registry_url: str = ""
    docker_username: str = ""


class DockerPrivateSecret(FieldGroup):
    docker_password: str = ""


class RegistryDockerPrivate(BaseRegistry):
    """Any registry speaking the Docker/OCI distribution API."""

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.DOCKER_PRIVATE
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("non_secret.docker_registry_url",)

    registry_type: str = RegistryType.DOCKER_PRIVATE.value
    non_secret: DockerPrivateNonSecret = Field(default_factory=DockerPrivateNonSecret)
    secret: DockerPrivateSecret = Field(default_factory=DockerPrivateSecret)

    def get_namespace(self) -> str:
        return self.non_secret.docker_registry_url

    def get_username(self) -> str:
        return self.non_secret.docker_username

    def client(self) -> OCIRegistryClient:
        return OCIRegistryClient(
            self.non_secret.docker_registry_url,
            auth=RegistryAuth(
                username=self.non_secret.docker_username or None,
                password=self.secret.docker_password or None,
            ),
        )
