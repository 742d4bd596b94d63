"""JFrog Artifactory registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth, registry_host
from registry_adapters.clients.oci import OCIRegistryClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class JfrogNonSecret(FieldGroup):
    jfrog_registry_url: str = ""
    jfrog_repository: str = ""
    jfrog_username: str = ""


class JfrogSecret(FieldGroup):
    jfrog_password: str = ""


class RegistryJfrog(BaseRegistry):
    """A Docker repository hosted in JFrog Artifactory.

    Artifactory serves each Docker repository's distribution API under
    ``/artifactory/api/docker/<repository>``.
    """

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.JFROG
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "non_secret.jfrog_registry_url",
        "non_secret.jfrog_repository",
        "non_secret.jfrog_username",
        "secret.jfrog_password",
    )

    registry_type: str = RegistryType.JFROG.value
    non_secret: JfrogNonSecret = Field(default_factory=JfrogNonSecret)
    secret: JfrogSecret = Field(default_factory=JfrogSecret)

    def get_namespace(self) -> str:
        return self.non_secret.jfrog_repository

    def get_username(self) -> str:
        return self.non_secret.jfrog_username

    def client(self) -> OCIRegistryClient:
        url = self.non_secret.jfrog_registry_url.rstrip("/")
        repository = self.non_secret.jfrog_repository
        return OCIRegistryClient(
            f"{url}/artifactory/api/docker/{repository}",
            auth=RegistryAuth(
                username=self.non_secret.jfrog_username,
                password=self.secret.jfrog_password,
            ),
            image_prefix=f"{registry_host(url)}/{repository}",
        )
