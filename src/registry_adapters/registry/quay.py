"""Quay registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.quay import QuayClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


class QuayNonSecret(FieldGroup):
    quay_namespace: str = ""
    quay_registry_url: str = ""


class QuaySecret(FieldGroup):
    quay_access_token: str = ""


class RegistryQuay(BaseRegistry):
    """Quay namespace on quay.io or a self-hosted Quay.

    An empty ``quay_registry_url`` means quay.io.
    """

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.QUAY
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("non_secret.quay_namespace",)

    registry_type: str = RegistryType.QUAY.value
    non_secret: QuayNonSecret = Field(default_factory=QuayNonSecret)
    secret: QuaySecret = Field(default_factory=QuaySecret)

    def get_namespace(self) -> str:
        return self.non_secret.quay_namespace

    def client(self) -> QuayClient:
        return QuayClient(
            namespace=self.non_secret.quay_namespace,
            base_url=self.non_secret.quay_registry_url or None,
            auth=RegistryAuth(token=self.secret.quay_access_token or None),
        )
