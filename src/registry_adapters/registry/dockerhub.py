"""Docker Hub registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.dockerhub import DockerHubClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class DockerHubNonSecret(FieldGroup):
    docker_hub_namespace: str = ""
    docker_hub_username: str = ""


class DockerHubSecret(FieldGroup):
    docker_hub_password: str = ""


class RegistryDockerHub(BaseRegistry):
    """Docker Hub namespace (user or organization).

    Username and password are optional; without them only the public
    repositories of the namespace are listed.

    Example:
        registry = RegistryDockerHub(
            name="acme",
            non_secret=DockerHubNonSecret(docker_hub_namespace="acme"),
        )
    """

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.DOCKER_HUB
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("non_secret.docker_hub_namespace",)

    registry_type: str = RegistryType.DOCKER_HUB.value
    non_secret: DockerHubNonSecret = Field(default_factory=DockerHubNonSecret)
    secret: DockerHubSecret = Field(default_factory=DockerHubSecret)

    def get_namespace(self) -> str:
        return self.non_secret.docker_hub_namespace

    def get_username(self) -> str:
        return self.non_secret.docker_hub_username

    def missing_fields(self) -> list[str]:
        missing = super().missing_fields()
        # Credentials are all-or-nothing.
        if self.non_secret.docker_hub_username and not self.secret.docker_hub_password:
            missing.append("secret.docker_hub_password")
        return missing

    def client(self) -> DockerHubClient:
        return DockerHubClient(
            namespace=self.non_secret.docker_hub_namespace,
            auth=RegistryAuth(
                username=self.non_secret.docker_hub_username or None,
                password=self.secret.docker_hub_password or None,
            ),
        )
