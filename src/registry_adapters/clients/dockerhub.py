"""Docker Hub API client."""

from __future__ import annotations

from typing import Any

import httpx

from registry_adapters.clients.base import HTTPRegistryClient, RegistryAuth, build_ingested_image
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.utils.config import HttpConfig
from registry_adapters.utils.errors import AuthenticationError, NetworkError, retry
from registry_adapters.utils.logging import get_logger

logger = get_logger("clients.dockerhub")


class DockerHubClient(HTTPRegistryClient):
    """Client for the Docker Hub web API (hub.docker.com).

    Logs in with username/password (or a personal access token as the
    password) and lists the repositories and tags of one namespace.
    Anonymous access lists public repositories only.
    """

    HUB_URL = "https://hub.docker.com"
    IMAGE_PREFIX = "docker.io"
    PAGE_SIZE = 100

    def __init__(
        self,
        namespace: str,
        auth: RegistryAuth | None = None,
        http: HttpConfig | None = None,
    ) -> None:
        super().__init__(self.HUB_URL, auth=auth, http=http)
        self.namespace = namespace
        self._jwt: str | None = None

    @retry(max_attempts=3, delay=0.5, exceptions=(NetworkError,))
    def _login(self, client: httpx.Client) -> str:
        data = self._get_json(
            client,
            f"{self.base_url}/v2/users/login",
            method="POST",
            expect=dict,
            json={"username": self.auth.username, "password": self.auth.password},
        )
        token = data.get("token")
        if not token:
            raise AuthenticationError("Docker Hub login returned no token")
        return token

    def _headers(self, client: httpx.Client) -> dict[str, str]:
        if not self.auth.basic():
            return {}
        if self._jwt is None:
            self._jwt = self._login(client)
        return {"Authorization": f"Bearer {self._jwt}"}

    def _paginate(self, client: httpx.Client, url: str) -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"page_size": self.PAGE_SIZE}
        while next_url:
            data = self._get_json(
                client, next_url, headers=self._headers(client), params=params, expect=dict
            )
            results.extend(data.get("results") or [])
            next_url = data.get("next")
            params = None
        return results

    def ping(self) -> None:
        with self._get_client() as client:
            if self.auth.basic():
                self._jwt = self._login(client)
            else:
                self._get_json(
                    client,
                    f"{self.base_url}/v2/namespaces/{self.namespace}/repositories/",
                    expect=dict,
                )

    def list_repositories(self) -> list[str]:
        with self._get_client() as client:
            repos = self._paginate(client, f"{self.base_url}/v2/repositories/{self.namespace}/")
        return [repo["name"] for repo in repos if repo.get("name")]

    def list_images(self) -> list[IngestedContainerImage]:
        images = []
        repositories = self.list_repositories()
        with self._get_client() as client:
            for repository in repositories:
                tags = self._paginate(
                    client,
                    f"{self.base_url}/v2/repositories/{self.namespace}/{repository}/tags/",
                )
                for tag in tags:
                    images.append(
                        build_ingested_image(
                            name=f"{self.IMAGE_PREFIX}/{self.namespace}/{repository}",
                            tag=tag["name"],
                            digest=tag.get("digest"),
                            size=tag.get("full_size"),
                            created_at=tag.get("last_updated"),
                            repository=repository,
                            namespace=self.namespace,
                        )
                    )
        logger.debug(f"Docker Hub namespace {self.namespace}: {len(images)} images")
        return images
