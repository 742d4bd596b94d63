"""OCI distribution API client."""

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
from registry_adapters.utils.errors import AuthenticationError, RegistryAdapterError
from registry_adapters.utils.logging import get_logger_with_context


class OCIRegistryClient(HTTPRegistryClient):
    """Client for registries implementing the OCI distribution API.

    Handles both bearer-token registries (a 401 with a ``Bearer``
    challenge is answered by fetching a token from the realm) and plain
    basic-auth registries. Used for ACR, GCR, JFrog and self-hosted
    registries.

    Example:
        client = OCIRegistryClient(
            "https://myregistry.azurecr.io",
            auth=RegistryAuth(username="bot", password="secret"),
        )
        for image in client.list_images():
            print(image.full_reference)
    """

    PAGE_SIZE = 100

    def __init__(
        self,
        base_url: str,
        auth: RegistryAuth | None = None,
        http: HttpConfig | None = None,
        image_prefix: str | None = None,
    ) -> None:
        """Initialize the OCI client.

        Args:
            base_url: Registry root; the ``/v2/`` API lives directly below it
            auth: Authentication credentials
            http: HTTP settings (defaults to the global config)
            image_prefix: Prefix for image names in results (defaults to the host)
        """
        super().__init__(base_url, auth=auth, http=http)
        self.image_prefix = image_prefix or registry_host(self.base_url)
        self._token_cache: dict[str, str] = {}
        self._log = get_logger_with_context("clients.oci", registry=self.base_url)

    def _get_token(self, client: httpx.Client, www_authenticate: str, scope: str) -> str:
        """Get a bearer token for the given scope.

        Args:
            client: HTTP client
            www_authenticate: WWW-Authenticate header value
            scope: Token scope, e.g. ``repository:app:pull``

        Returns:
            Bearer token
        """
        # Format: Bearer realm="...",service="...",scope="..."
        params = {}
        for part in www_authenticate[len("Bearer "):].split(","):
            if "=" in part:
                key, value = part.split("=", 1)
                params[key.strip()] = value.strip().strip('"')

        realm = params.get("realm")
        if not realm:
            raise AuthenticationError("No realm in WWW-Authenticate header")

        if self.auth.token:
            return self.auth.token

        token_params = {"service": params.get("service", ""), "scope": scope}
        data = self._get_json(client, realm, params=token_params, auth=self.auth.basic(), expect=dict)
        return data.get("token") or data.get("access_token", "")

    def _request(
        self,
        client: httpx.Client,
        url: str,
        scope: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an authenticated GET, negotiating auth on the first 401."""
        headers = dict(kwargs.pop("headers", None) or {})

        if scope in self._token_cache:
            headers["Authorization"] = f"Bearer {self._token_cache[scope]}"

        response = self._send(client, "GET", url, headers=headers, **kwargs)

        if response.status_code == 401:
            www_auth = response.headers.get("www-authenticate", "")
            if www_auth.lower().startswith("bearer"):
                token = self._get_token(client, www_auth, scope)
                self._token_cache[scope] = token
                headers["Authorization"] = f"Bearer {token}"
                response = self._send(client, "GET", url, headers=headers, **kwargs)
            elif self.auth.basic():
                response = self._send(client, "GET", url, headers=headers, auth=self.auth.basic(), **kwargs)

        self._check_response(response)
        return response

    def ping(self) -> None:
        with self._get_client() as client:
            self._request(client, f"{self.base_url}/v2/", scope="registry:catalog:*")

    def list_repositories(self) -> list[str]:
        """List repositories via ``/v2/_catalog``, following Link pagination."""
        repositories: list[str] = []
        url: str | None = f"{self.base_url}/v2/_catalog"
        params: dict[str, Any] | None = {"n": self.PAGE_SIZE}

        with self._get_client() as client:
            while url is not None:
                response = self._request(client, url, scope="registry:catalog:*", params=params)
                repositories.extend(self._decode_json(response, expect=dict).get("repositories") or [])
                url = self._next_link(response)
                params = None

        self._log.debug("Listed catalog", extra={"repositories": len(repositories)})
        return repositories

    def list_tags(self, repository: str) -> list[str]:
        """List all tags of a repository."""
        tags: list[str] = []
        url: str | None = f"{self.base_url}/v2/{repository}/tags/list"
        scope = f"repository:{repository}:pull"

        with self._get_client() as client:
            while url is not None:
                response = self._request(client, url, scope=scope)
                tags.extend(self._decode_json(response, expect=dict).get("tags") or [])
                url = self._next_link(response)

        return sorted(tags)

    def list_images(self) -> list[IngestedContainerImage]:
        images = []
        for repository in self.list_repositories():
            try:
                tags = self.list_tags(repository)
            except AuthenticationError:
                raise
            except RegistryAdapterError as e:
                self._log.warning(f"Skipping repository: {e}", extra={"repository": repository})
                continue
            for tag in tags:
                images.append(
                    build_ingested_image(
                        name=f"{self.image_prefix}/{repository}",
                        tag=tag,
                        repository=repository,
                    )
                )
        return images

    @staticmethod
    def _next_link(response: httpx.Response) -> str | None:
        next_link = response.links.get("next", {}).get("url")
        if not next_link:
            return None
        return str(response.url.join(next_link))
