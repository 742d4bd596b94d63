"""Base registry protocol and types."""

from __future__ import annotations

import json
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError as PydanticValidationError, model_validator

from registry_adapters.clients.base import RegistryClient
from registry_adapters.models.common import RegistryType
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.models.row import ContainerRegistryRow, ContainerRegistrySafeRow
from registry_adapters.utils.encryption import SecretCipher
from registry_adapters.utils.errors import DeserializationError, EncryptionError
from registry_adapters.utils.logging import get_logger

logger = get_logger("registry")


@runtime_checkable
class Registry(Protocol):
    """Protocol implemented by every registry adapter.

    A registry handle is built from a request payload or a stored row
    (see :mod:`registry_adapters.registry.factory`), used for a single
    operation and then discarded.

    Secrets are only ever transformed in place by the encrypt/decrypt
    operations. Handles built from a stored row hold *encrypted* secrets
    until ``decrypt_secret`` is called; credential checks and image
    listing need plaintext secrets.
    """

    def is_valid_credential(self) -> bool:
        """Check whether the credentials are usable.

        Returns False without touching the network when a required field
        is empty, otherwise asks the registry.
        """
        ...

    def encrypt_secret(self, cipher: SecretCipher) -> None:
        """Encrypt every non-empty secret field in place.

        Raises:
            EncryptionError: If the cipher fails; the handle is unchanged
        """
        ...

    def decrypt_secret(self, cipher: SecretCipher) -> None:
        """Decrypt every non-empty secret field in place.

        Raises:
            EncryptionError: If the cipher fails; the handle is unchanged
        """
        ...

    def encrypt_extras(self, cipher: SecretCipher) -> None:
        """Encrypt the extras set in place (no-op without extras)."""
        ...

    def decrypt_extras(self, cipher: SecretCipher) -> None:
        """Decrypt the extras set in place (no-op without extras)."""
        ...

    def get_secret(self) -> dict[str, Any]:
        """Secret fields keyed by their wire names."""
        ...

    def get_extras(self) -> dict[str, Any]:
        """Extras keyed by their wire names, empty without extras."""
        ...

    def fetch_images_from_registry(self) -> list[IngestedContainerImage]:
        """List every tagged image in the registry.

        Raises:
            AuthenticationError: If the registry rejects the credentials
            NetworkError: If the registry cannot be reached
            RegistryAdapterError: For other errors
        """
        ...

    def get_namespace(self) -> str:
        ...

    def get_registry_type(self) -> str:
        ...

    def get_username(self) -> str:
        ...


class FieldGroup(BaseModel):
    """A flat group of string fields (non-secret, secret or extras).

    Unknown keys are ignored and absent keys keep their zero value.
    """

    model_config = {"extra": "ignore"}


def decode_blob(blob: bytes | str, field: str, strict: bool = True) -> dict[str, Any]:
    """Decode a stored JSON object blob.

    Args:
        blob: Raw column value
        field: Column name, reported in errors
        strict: Require every value to be a string

    Returns:
        The decoded mapping; a JSON ``null`` decodes to an empty mapping

    Raises:
        DeserializationError: If the blob is not a JSON object of the expected shape
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise DeserializationError(f"Cannot decode {field}: {e}", field=field)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DeserializationError(
            f"Cannot decode {field}: expected a JSON object, got {type(data).__name__}",
            field=field,
        )
    if strict:
        for key, value in data.items():
            if not isinstance(value, str):
                raise DeserializationError(
                    f"Cannot decode {field}: value of {key!r} is not a string",
                    field=field,
                )
    return data


def _describe_errors(error: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in error.errors(include_url=False, include_input=False)
    )


def _apply(group: FieldGroup, func: Callable[[str], str], group_name: str) -> FieldGroup:
    """Return a copy of group with func applied to every non-empty value."""
    updated = {}
    for key, value in group.model_dump().items():
        if not value:
            continue
        if not isinstance(value, str):
            raise EncryptionError(f"{group_name}.{key} is not a string", field=f"{group_name}.{key}")
        updated[key] = func(value)
    return group.model_copy(update=updated)


class BaseRegistry(BaseModel):
    """Common implementation of the Registry protocol.

    Subclasses declare ``non_secret`` and ``secret`` (and optionally
    ``extras``) as FieldGroup models whose field names are the wire
    names, plus the accessors and client that differ per provider.
    """

    REGISTRY_TYPE: ClassVar[RegistryType]
    HAS_EXTRAS: ClassVar[bool] = False
    # Dotted paths into the field groups, e.g. "non_secret.quay_namespace".
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ()

    registry_type: str = ""
    name: str = ""
    non_secret: FieldGroup
    secret: FieldGroup

    @model_validator(mode="after")
    def _check_registry_type(self) -> "BaseRegistry":
        """Fill an empty tag from the class and reject a tag naming another type."""
        expected = getattr(type(self), "REGISTRY_TYPE", None)
        if expected is None:
            return self
        if not self.registry_type:
            self.registry_type = expected.value
        elif self.registry_type != expected.value:
            raise DeserializationError(
                f"registry_type {self.registry_type!r} does not match {expected.value!r}",
                field="registry_type",
            )
        return self

    # -- construction ---------------------------------------------------

    @classmethod
    def from_payload(cls, payload: bytes | str) -> "BaseRegistry":
        """Build a handle from a request payload in the provider's JSON shape.

        Raises:
            DeserializationError: If the payload is malformed or names another type
        """
        try:
            return cls.model_validate_json(payload)
        except PydanticValidationError as e:
            raise DeserializationError(
                f"Invalid {cls.REGISTRY_TYPE.value} payload: {_describe_errors(e)}",
                field="payload",
            )

    @classmethod
    def from_row(cls, row: ContainerRegistryRow) -> "BaseRegistry":
        """Build a handle with (still encrypted) secrets from a full row."""
        data: dict[str, Any] = {
            "registry_type": row.registry_type,
            "name": row.name,
            "non_secret": decode_blob(row.non_secret, "non_secret"),
            "secret": decode_blob(row.encrypted_secret, "encrypted_secret"),
        }
        if cls.HAS_EXTRAS:
            data["extras"] = decode_blob(row.extras, "extras", strict=False)
        return cls._validate_row(data)

    @classmethod
    def from_safe_row(cls, row: ContainerRegistrySafeRow) -> "BaseRegistry":
        """Build a handle without secrets from a redacted row."""
        return cls._validate_row(
            {
                "registry_type": row.registry_type,
                "name": row.name,
                "non_secret": decode_blob(row.non_secret, "non_secret"),
            }
        )

    @classmethod
    def _validate_row(cls, data: dict[str, Any]) -> "BaseRegistry":
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise DeserializationError(
                f"Invalid stored {cls.REGISTRY_TYPE.value} registry: {_describe_errors(e)}",
                field="row",
            )

    def to_row(self, row_id: int | None = None) -> ContainerRegistryRow:
        """Serialize to the stored row format.

        The secret set is written as-is: call ``encrypt_secret`` (and
        ``encrypt_extras``) first.
        """
        return ContainerRegistryRow(
            id=row_id,
            name=self.name,
            registry_type=self.registry_type,
            non_secret=json.dumps(self.get_non_secret()).encode(),
            encrypted_secret=json.dumps(self.get_secret()).encode(),
            extras=json.dumps(self.get_extras()).encode(),
        )

    # -- secrets --------------------------------------------------------

    def encrypt_secret(self, cipher: SecretCipher) -> None:
        self.secret = _apply(self.secret, cipher.encrypt, "secret")

    def decrypt_secret(self, cipher: SecretCipher) -> None:
        self.secret = _apply(self.secret, cipher.decrypt, "secret")

    def encrypt_extras(self, cipher: SecretCipher) -> None:
        extras = self._extras()
        if extras is not None:
            self.extras = _apply(extras, cipher.encrypt, "extras")

    def decrypt_extras(self, cipher: SecretCipher) -> None:
        extras = self._extras()
        if extras is not None:
            self.extras = _apply(extras, cipher.decrypt, "extras")

    def _extras(self) -> FieldGroup | None:
        return getattr(self, "extras", None) if self.HAS_EXTRAS else None

    # -- accessors ------------------------------------------------------

    def get_non_secret(self) -> dict[str, Any]:
        return self.non_secret.model_dump()

    def get_secret(self) -> dict[str, Any]:
        return self.secret.model_dump()

    def get_extras(self) -> dict[str, Any]:
        extras = self._extras()
        return extras.model_dump() if extras is not None else {}

    def get_registry_type(self) -> str:
        return self.registry_type

    def get_namespace(self) -> str:
        return ""

    def get_username(self) -> str:
        return ""

    # -- registry access ------------------------------------------------

    def missing_fields(self) -> list[str]:
        """Required fields that are empty, as dotted paths."""
        missing = []
        for path in self.REQUIRED_FIELDS:
            group_name, field_name = path.split(".", 1)
            if not getattr(getattr(self, group_name), field_name):
                missing.append(path)
        return missing

    def client(self) -> RegistryClient:
        """Client for this registry's API, built from the current fields."""
        raise NotImplementedError

    def is_valid_credential(self) -> bool:
        missing = self.missing_fields()
        if missing:
            logger.info(
                f"{self.registry_type} registry {self.name!r} is missing: {', '.join(missing)}"
            )
            return False
        return self.client().check_credentials()

    def fetch_images_from_registry(self) -> list[IngestedContainerImage]:
        logger.debug(f"Fetching images from {self.registry_type} registry {self.name!r}")
        images = self.client().list_images()
        logger.info(f"Fetched {len(images)} images from {self.registry_type} registry {self.name!r}")
        return images
