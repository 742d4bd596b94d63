"""Harbor API client."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from registry_adapters.clients.base import (
    HTTPRegistryClient,
    RegistryAuth,
    build_ingested_image,
    registry_host,
)
from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.utils.config import HttpConfig
from registry_adapters.utils.logging import get_logger

logger = get_logger("clients.harbor")


class HarborClient(HTTPRegistryClient):
    """Client for the Harbor v2.0 API, scoped to one project."""

    PAGE_SIZE = 100

    def __init__(
        self,
        base_url: str,
        project: str,
        auth: RegistryAuth | None = None,
        http: HttpConfig | None = None,
    ) -> None:
        super().__init__(base_url, auth=auth, http=http)
        self.project = project

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/api/v2.0"

    def _paginate(self, client: httpx.Client, url: str, **params: Any) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self._get_json(
                client,
                url,
                auth=self.auth.basic(),
                params={**params, "page": page, "page_size": self.PAGE_SIZE},
                expect=list,
            )
            items.extend(batch or [])
            if not batch or len(batch) < self.PAGE_SIZE:
                break
            page += 1
        return items

    def ping(self) -> None:
        with self._get_client() as client:
            self._get_json(
                client, f"{self.api_url}/projects/{self.project}", auth=self.auth.basic(), expect=dict
            )

    def list_repositories(self) -> list[str]:
        """Repository names relative to the project."""
        with self._get_client() as client:
            repos = self._paginate(client, f"{self.api_url}/projects/{self.project}/repositories")
        prefix = f"{self.project}/"
        return [
            repo["name"][len(prefix):] if repo["name"].startswith(prefix) else repo["name"]
            for repo in repos
        ]

    def list_images(self) -> list[IngestedContainerImage]:
        images = []
        host = registry_host(self.base_url)
        repositories = self.list_repositories()
        with self._get_client() as client:
            for repository in repositories:
                # Harbor expects slashes in repository names double-encoded.
                encoded = quote(quote(repository, safe=""), safe="")
                artifacts = self._paginate(
                    client,
                    f"{self.api_url}/projects/{self.project}/repositories/{encoded}/artifacts",
                    with_tag="true",
                )
                for artifact in artifacts:
                    for tag in artifact.get("tags") or []:
                        images.append(
                            build_ingested_image(
                                name=f"{host}/{self.project}/{repository}",
                                tag=tag["name"],
                                digest=artifact.get("digest"),
                                size=artifact.get("size"),
                                created_at=artifact.get("push_time"),
                                repository=repository,
                                project=self.project,
                            )
                        )
        logger.debug(f"Harbor project {self.project}: {len(images)} images")
        return images
