"""Google Container Registry / Artifact Registry adapter."""

from __future__ import annotations

import json
from typing import Any, ClassVar, cast

from pydantic import Field, field_validator

from registry_adapters.clients.base import RegistryAuth
from registry_adapters.clients.oci import OCIRegistryClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup
from registry_adapters.utils.errors import DeserializationError

DEFAULT_GCR_URL = "https://gcr.io"
# Username GCR expects when the password is a service-account key file.
JSON_KEY_USERNAME = "_json_key"


class GCRNonSecret(FieldGroup):
    registry_url: str = ""
    project_id: str = ""


class GCRSecret(FieldGroup):
    project_id: str = ""
    private_key_id: str = ""


class GCRExtras(FieldGroup):
    service_account_json: str = ""

    @field_validator("service_account_json", mode="before")
    @classmethod
    def _serialize_document(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return json.dumps(value)
        return value


class RegistryGCR(BaseRegistry):
    """GCR or Artifact Registry, authenticated with a service-account key.

    The key document lives in the extras set and is encrypted
    separately from the secret set, which only carries the identifying
    ``project_id`` and ``private_key_id`` of the key.
    """

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.GCR
    HAS_EXTRAS: ClassVar[bool] = True
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = (
        "non_secret.registry_url",
        "extras.service_account_json",
    )

    registry_type: str = RegistryType.GCR.value
    non_secret: GCRNonSecret = Field(default_factory=GCRNonSecret)
    secret: GCRSecret = Field(default_factory=GCRSecret)
    extras: GCRExtras = Field(default_factory=GCRExtras)

    @classmethod
    def from_payload(cls, payload: bytes | str) -> "RegistryGCR":
        """Build from a payload, filling gaps from the service-account key.

        A payload may carry only ``extras.service_account_json``; the
        project and key ids are then read from the key document.
        """
        registry = cast(RegistryGCR, super().from_payload(payload))
        registry._fill_from_service_account()
        return registry

    def _fill_from_service_account(self) -> None:
        if not self.extras.service_account_json:
            return
        try:
            document = json.loads(self.extras.service_account_json)
        except ValueError as e:
            raise DeserializationError(
                f"service_account_json is not valid JSON: {e}",
                field="extras.service_account_json",
            )
        if not isinstance(document, dict):
            raise DeserializationError(
                "service_account_json must be a JSON object",
                field="extras.service_account_json",
            )

        project_id = document.get("project_id") or ""
        self.non_secret = self.non_secret.model_copy(
            update={
                "registry_url": self.non_secret.registry_url or DEFAULT_GCR_URL,
                "project_id": self.non_secret.project_id or project_id,
            }
        )
        self.secret = self.secret.model_copy(
            update={
                "project_id": self.secret.project_id or project_id,
                "private_key_id": self.secret.private_key_id or document.get("private_key_id") or "",
            }
        )

    def get_namespace(self) -> str:
        return self.non_secret.project_id

    def client(self) -> OCIRegistryClient:
        return OCIRegistryClient(
            self.non_secret.registry_url,
            auth=RegistryAuth(
                username=JSON_KEY_USERNAME,
                password=self.extras.service_account_json,
            ),
        )
