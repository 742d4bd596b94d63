"""Harbor registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.harbor import HarborClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class HarborNonSecret(FieldGroup):
    harbor_registry_url: str = ""
    harbor_username: str = ""
    harbor_project_name: str = ""


class HarborSecret(FieldGroup):
    harbor_password: str = ""


class RegistryHarbor(BaseRegistry):
    """One project in a Harbor installation."""

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.HARBOR
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "non_secret.harbor_registry_url",
        "non_secret.harbor_username",
        "non_secret.harbor_project_name",
        "secret.harbor_password",
    )

    registry_type: str = RegistryType.HARBOR.value
    non_secret: HarborNonSecret = Field(default_factory=HarborNonSecret)
    secret: HarborSecret = Field(default_factory=HarborSecret)

    def get_namespace(self) -> str:
        return self.non_secret.harbor_project_name

    def get_username(self) -> str:
        return self.non_secret.harbor_username

    def client(self) -> HarborClient:
        return HarborClient(
            self.non_secret.harbor_registry_url,
            project=self.non_secret.harbor_project_name,
            auth=RegistryAuth(
                username=self.non_secret.harbor_username,
                password=self.secret.harbor_password,
            ),
        )
