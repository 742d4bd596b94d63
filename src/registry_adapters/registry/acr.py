"""Azure Container Registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.oci import OCIRegistryClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class ACRNonSecret(FieldGroup):
    azure_registry_url: str = ""
    azure_registry_username: str = ""


class ACRSecret(FieldGroup):
    azure_registry_password: str = ""


class RegistryACR(BaseRegistry):
    """Azure Container Registry, authenticated with an admin user or service principal."""

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.ACR
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "non_secret.azure_registry_url",
        "non_secret.azure_registry_username",
        "secret.azure_registry_password",
    )

    registry_type: str = RegistryType.ACR.value
    non_secret: ACRNonSecret = Field(default_factory=ACRNonSecret)
    secret: ACRSecret = Field(default_factory=ACRSecret)

    def get_namespace(self) -> str:
        return self.non_secret.azure_registry_url

    def get_username(self) -> str:
        return self.non_secret.azure_registry_username

    def client(self) -> OCIRegistryClient:
        return OCIRegistryClient(
            self.non_secret.azure_registry_url,
            auth=RegistryAuth(
                username=self.non_secret.azure_registry_username,
                password=self.secret.azure_registry_password,
            ),
        )
