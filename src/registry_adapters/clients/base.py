"""Shared pieces of the registry API clients."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, Field

from registry_adapters.models.image import IngestedContainerImage
from registry_adapters.utils.config import HttpConfig, get_config
from registry_adapters.utils.errors import (
    AuthenticationError,
    NetworkError,
    RegistryAdapterError,
)
from registry_adapters.utils.logging import get_logger

logger = get_logger("clients")


class RegistryAuth(BaseModel):
    """Authentication credentials for a container registry."""

    model_config = {"frozen": True}

    username: str | None = Field(default=None, description="Registry username")
    password: str | None = Field(default=None, description="Registry password or token")
    token: str | None = Field(default=None, description="Bearer token")

    def basic(self) -> tuple[str, str] | None:
        """Username/password pair for httpx basic auth, if both are set."""
        if self.username and self.password:
            return (self.username, self.password)
        return None

    def __repr__(self) -> str:
        return f"RegistryAuth(username={self.username!r})"


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for clients that talk to a registry's API."""

    def check_credentials(self) -> bool:
        """Perform a lightweight authenticated call.

        Returns:
            True if the registry accepted the credentials
        """
        ...

    def list_images(self) -> list[IngestedContainerImage]:
        """Enumerate every tagged image visible to the credentials.

        Raises:
            AuthenticationError: If the registry rejects the credentials
            NetworkError: If the registry cannot be reached
            RegistryAdapterError: For other errors
        """
        ...


class HTTPRegistryClient:
    """Base class for httpx-based registry clients.

    Subclasses set ``base_url`` and ``auth`` and use :meth:`_get_json`
    for requests, which maps transport and status failures onto the
    package's error hierarchy.
    """

    def __init__(
        self,
        base_url: str,
        auth: RegistryAuth | None = None,
        http: HttpConfig | None = None,
    ) -> None:
        self.base_url = normalize_url(base_url)
        self.auth = auth or RegistryAuth()
        self._http = http or get_config().http

    def _get_client(self) -> httpx.Client:
        """Create an HTTP client with retry support."""
        transport = httpx.HTTPTransport(retries=self._http.max_retries, verify=self._http.verify_tls)
        return httpx.Client(
            timeout=self._http.timeout,
            transport=transport,
            follow_redirects=True,
        )

    def _send(
        self,
        client: httpx.Client,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            return client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url)

    def _check_response(self, response: httpx.Response) -> None:
        url = str(response.request.url)
        if response.status_code in (401, 403):
            raise AuthenticationError(f"Authentication failed for {url} ({response.status_code})")
        if response.status_code >= 400:
            raise RegistryAdapterError(
                f"Registry request failed: {response.status_code}",
                code="REGISTRY_ERROR",
                details={"url": url, "status_code": response.status_code},
            )

    def _get_json(
        self,
        client: httpx.Client,
        url: str,
        method: str = "GET",
        expect: type | None = None,
        **kwargs: Any,
    ) -> Any:
        """Request a URL and decode its JSON body.

        Args:
            expect: Required type of the decoded body, e.g. ``dict``

        Raises:
            AuthenticationError: On 401/403
            NetworkError: On transport failures
            RegistryAdapterError: On other error statuses, bad JSON or
                a body that is not of the ``expect`` type
        """
        response = self._send(client, method, url, **kwargs)
        self._check_response(response)
        return self._decode_json(response, expect=expect)

    def _decode_json(self, response: httpx.Response, expect: type | None = None) -> Any:
        url = str(response.request.url)
        try:
            data = response.json()
        except ValueError:
            raise RegistryAdapterError(
                f"Registry returned invalid JSON from {url}",
                code="REGISTRY_ERROR",
                details={"url": url},
            )
        if expect is not None and not isinstance(data, expect):
            raise RegistryAdapterError(
                f"Registry returned a JSON {type(data).__name__} from {url}, expected {expect.__name__}",
                code="REGISTRY_ERROR",
                details={"url": url},
            )
        return data

    def check_credentials(self) -> bool:
        try:
            self.ping()
            return True
        except RegistryAdapterError as e:
            logger.warning(f"Credential check against {self.base_url} failed: {e}")
            return False

    def ping(self) -> None:
        """Make a cheap authenticated request, raising on failure."""
        raise NotImplementedError


def normalize_url(url: str) -> str:
    """Default to HTTPS and strip trailing slashes."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url.rstrip("/")


def registry_host(url: str) -> str:
    """Hostname (with port) of a registry URL, as used in image names."""
    return normalize_url(url).split("://", 1)[1].split("/", 1)[0]


def build_ingested_image(
    name: str,
    tag: str,
    digest: str | None = None,
    size: int | str | None = None,
    created_at: str | None = None,
    **metadata: Any,
) -> IngestedContainerImage:
    """Build an image record with the id conventions used across providers."""
    return IngestedContainerImage(
        id=digest or f"{name}:{tag}",
        node_id=f"{name}:{tag}",
        name=name,
        tag=tag,
        digest=digest,
        size=str(size) if size is not None else "",
        created_at=created_at or "",
        metadata={k: v for k, v in metadata.items() if v is not None},
    )
