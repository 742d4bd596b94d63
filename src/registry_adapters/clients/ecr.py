"""Amazon ECR client built on boto3."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from registry_adapters.clients.base import build_ingested_image
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.utils.errors import AuthenticationError, NetworkError, RegistryAdapterError
from registry_adapters.utils.logging import get_logger

logger = get_logger("clients.ecr")

AUTH_ERROR_CODES = {
    "AccessDenied",
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
}

# ECR Public only exists in us-east-1.
PUBLIC_REGION = "us-east-1"


class ECRClient:
    """Client for private (``ecr``) and public (``ecr-public``) repositories.

    Credentials come from an access key pair, or from the default boto3
    credential chain when ``use_iam_role`` is set. With
    ``target_account_role_arn`` the client first assumes that role
    through STS, for cross-account scanning.
    """

    def __init__(
        self,
        region: str,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        use_iam_role: bool = False,
        is_public: bool = False,
        target_account_role_arn: str | None = None,
        account_id: str | None = None,
    ) -> None:
        self.region = PUBLIC_REGION if is_public else region
        self.is_public = is_public
        self.account_id = account_id or None
        self._use_iam_role = use_iam_role
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._target_role_arn = target_account_role_arn or None

    def _session(self) -> boto3.session.Session:
        if self._use_iam_role:
            session = boto3.session.Session(region_name=self.region)
        else:
            session = boto3.session.Session(
                aws_access_key_id=self._access_key_id,
                aws_secret_access_key=self._secret_access_key,
                region_name=self.region,
            )

        if not self._target_role_arn:
            return session

        creds = session.client("sts").assume_role(
            RoleArn=self._target_role_arn,
            RoleSessionName="registry-adapters",
        )["Credentials"]
        return boto3.session.Session(
            aws_access_key_id=creds["AccessKeyId"],
            aws_secret_access_key=creds["SecretAccessKey"],
            aws_session_token=creds["SessionToken"],
            region_name=self.region,
        )

    def _client(self) -> Any:
        return self._session().client("ecr-public" if self.is_public else "ecr")

    def _registry_args(self) -> dict[str, str]:
        if self.account_id and not self.is_public:
            return {"registryId": self.account_id}
        return {}

    def _call(self, operation: str, func: Any) -> Any:
        try:
            return func()
        except NoCredentialsError as e:
            raise AuthenticationError(f"No AWS credentials available: {e}")
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            logger.error(f"ECR {operation} failed with {code}")
            if code in AUTH_ERROR_CODES:
                raise AuthenticationError(f"ECR rejected credentials: {code}")
            raise RegistryAdapterError(
                f"ECR {operation} failed: {code}",
                code="REGISTRY_ERROR",
                details={"aws_error_code": code},
            )
        except BotoCoreError as e:
            raise NetworkError(f"ECR {operation} failed: {e}")

    def check_credentials(self) -> bool:
        try:
            self._call(
                "describe_repositories",
                lambda: self._client().describe_repositories(maxResults=1, **self._registry_args()),
            )
            return True
        except RegistryAdapterError as e:
            logger.warning(f"ECR credential check failed: {e}")
            return False

    def list_images(self) -> list[IngestedContainerImage]:
        return self._call("list_images", self._list_images)

    def _list_images(self) -> list[IngestedContainerImage]:
        client = self._client()
        images = []
        for page in client.get_paginator("describe_repositories").paginate(**self._registry_args()):
            for repo in page.get("repositories", []):
                images.extend(self._repository_images(client, repo))
        logger.debug(f"ECR ({'public' if self.is_public else self.region}): {len(images)} images")
        return images

    def _repository_images(self, client: Any, repo: dict[str, Any]) -> list[IngestedContainerImage]:
        images = []
        paginator = client.get_paginator("describe_images")
        for page in paginator.paginate(repositoryName=repo["repositoryName"], **self._registry_args()):
            for detail in page.get("imageDetails", []):
                pushed_at = detail.get("imagePushedAt")
                for tag in detail.get("imageTags") or []:
                    images.append(
                        build_ingested_image(
                            name=repo["repositoryUri"],
                            tag=tag,
                            digest=detail.get("imageDigest"),
                            size=detail.get("imageSizeInBytes"),
                            created_at=pushed_at.isoformat() if pushed_at else None,
                            repository=repo["repositoryName"],
                            registry_id=detail.get("registryId"),
                        )
                    )
        return images
