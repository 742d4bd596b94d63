"""Amazon ECR registry adapter."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from registry_adapters.clients.ecr import ECRClient
from registry_adapters.models.common import RegistryType
from registry_adapters.registry.base import BaseRegistry, FieldGroup


def _is_true(value: str) -> bool:
    return value.strip().lower() == "true"


class ECRNonSecret(FieldGroup):
    # Flags are stored as "true"/"false" strings.
    use_iam_role: str = ""
    is_public: str = ""
    aws_access_key_id: str = ""
    aws_region_name: str = ""
    aws_account_id: str = ""
    target_account_role_arn: str = ""


class ECRSecret(FieldGroup):
    aws_secret_access_key: str = ""


class RegistryECR(BaseRegistry):
    """Private or public ECR repositories of an AWS account.

    With ``use_iam_role`` the ambient AWS credentials (instance
    profile, IRSA, environment) are used instead of an access key pair.
    """

    REGISTRY_TYPE: ClassVar[RegistryType] = RegistryType.ECR

    registry_type: str = RegistryType.ECR.value
    non_secret: ECRNonSecret = Field(default_factory=ECRNonSecret)
    secret: ECRSecret = Field(default_factory=ECRSecret)

    @property
    def uses_iam_role(self) -> bool:
        return _is_true(self.non_secret.use_iam_role)

    @property
    def is_public(self) -> bool:
        return _is_true(self.non_secret.is_public)

    def get_namespace(self) -> str:
        return self.non_secret.aws_account_id

    def get_username(self) -> str:
        return self.non_secret.aws_access_key_id

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.is_public and not self.non_secret.aws_region_name:
            missing.append("non_secret.aws_region_name")
        if not self.uses_iam_role:
            if not self.non_secret.aws_access_key_id:
                missing.append("non_secret.aws_access_key_id")
            if not self.secret.aws_secret_access_key:
                missing.append("secret.aws_secret_access_key")
        return missing

    def client(self) -> ECRClient:
        return ECRClient(
            region=self.non_secret.aws_region_name,
            access_key_id=self.non_secret.aws_access_key_id or None,
            secret_access_key=self.secret.aws_secret_access_key or None,
            use_iam_role=self.uses_iam_role,
            is_public=self.is_public,
            target_account_role_arn=self.non_secret.target_account_role_arn or None,
            account_id=self.non_secret.aws_account_id or None,
        )
