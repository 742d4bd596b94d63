"""Quay API client."""

from __future__ import annotations

from typing import Any

import httpx

from registry_adapters.clients.base import (
    HTTPRegistryClient,
    RegistryAuth,
    build_ingested_image,
    registry_host,
)
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.utils.config import HttpConfig
from registry_adapters.utils.errors import safe_get
from registry_adapters.utils.logging import get_logger

logger = get_logger("clients.quay")


class QuayClient(HTTPRegistryClient):
    """Client for the Quay REST API (``/api/v1``).

    Authenticates with an OAuth access token sent as a bearer token.
    Works against quay.io and self-hosted Quay installations.
    """

    DEFAULT_URL = "https://quay.io"

    def __init__(
        self,
        namespace: str,
        base_url: str | None = None,
        auth: RegistryAuth | None = None,
        http: HttpConfig | None = None,
    ) -> None:
        super().__init__(base_url or self.DEFAULT_URL, auth=auth, http=http)
        self.namespace = namespace

    def _headers(self) -> dict[str, str]:
        if self.auth.token:
            return {"Authorization": f"Bearer {self.auth.token}"}
        return {}

    def _get(self, client: httpx.Client, path: str, **params: Any) -> Any:
        return self._get_json(
            client,
            f"{self.base_url}/api/v1{path}",
            headers=self._headers(),
            params=params or None,
            expect=dict,
        )

    def ping(self) -> None:
        with self._get_client() as client:
            self._get(client, "/repository", namespace=self.namespace)

    def list_repositories(self) -> list[str]:
        repositories: list[str] = []
        params: dict[str, Any] = {"namespace": self.namespace}
        with self._get_client() as client:
            while True:
                data = self._get(client, "/repository", **params)
                repositories.extend(repo["name"] for repo in data.get("repositories") or [])
                next_page = data.get("next_page")
                if not next_page:
                    break
                params = {"namespace": self.namespace, "next_page": next_page}
        return repositories

    def _list_tags(self, client: httpx.Client, repository: str) -> list[dict[str, Any]]:
        tags: list[dict[str, Any]] = []
        page = 1
        while True:
            data = self._get(
                client,
                f"/repository/{self.namespace}/{repository}/tag/",
                onlyActiveTags="true",
                page=page,
                limit=100,
            )
            tags.extend(data.get("tags") or [])
            if not safe_get(data, "has_additional", default=False):
                break
            page += 1
        return tags

    def list_images(self) -> list[IngestedContainerImage]:
        images = []
        host = registry_host(self.base_url)
        repositories = self.list_repositories()
        with self._get_client() as client:
            for repository in repositories:
                for tag in self._list_tags(client, repository):
                    images.append(
                        build_ingested_image(
                            name=f"{host}/{self.namespace}/{repository}",
                            tag=tag["name"],
                            digest=tag.get("manifest_digest"),
                            size=tag.get("size"),
                            created_at=tag.get("last_modified"),
                            repository=repository,
                            namespace=self.namespace,
                        )
                    )
        logger.debug(f"Quay namespace {self.namespace}: {len(images)} images")
        return images
