"""Integration tests for end-to-end workflows."""

import base64
import json

import httpx
import pytest

from registry_adapters import (
    ContainerRegistryRow,
    FernetCipher,
    get_registry,
    get_registry_with_registry_row,
    get_registry_with_registry_safe_row,
)
from registry_adapters.utils.errors import EncryptionError

HARBOR_AUTH = "Basic " + base64.b64encode(b"robot$scanner:harbor-pass").decode()


class TestCreateAndReadWorkflow:
    """A registry is created from a request, stored, then read back and scanned."""

    @pytest.fixture
    def harbor_api(self, mock_http):
        """A Harbor server with one project holding one tagged artifact."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.headers.get("authorization") != HARBOR_AUTH:
                return httpx.Response(401)
            path = request.url.path
            if path == "/api/v2.0/projects/platform":
                return httpx.Response(200, json={"name": "platform"})
            if path == "/api/v2.0/projects/platform/repositories":
                return httpx.Response(200, json=[{"name": "platform/web"}])
            if path == "/api/v2.0/projects/platform/repositories/web/artifacts":
                return httpx.Response(
                    200,
                    json=[{"digest": "sha256:web", "size": 512, "tags": [{"name": "1.4.2"}]}],
                )
            return httpx.Response(404)

        return mock_http(handler)

    def test_full_lifecycle(self, harbor_api, payload_bytes, cipher):
        """Test create, store, read, decrypt and list images."""
        # Create flow
        registry = get_registry("harbor", payload_bytes("harbor"))
        assert registry.is_valid_credential() is True

        registry.encrypt_secret(cipher)
        registry.encrypt_extras(cipher)
        row = registry.to_row(row_id=1)
        stored = ContainerRegistryRow.model_validate(row.model_dump())

        assert b"harbor-pass" not in stored.encrypted_secret

        # Listing page: safe row only
        listed = get_registry_with_registry_safe_row(stored.to_safe_row())
        assert listed.get_namespace() == "platform"
        assert listed.get_username() == "robot$scanner"
        assert listed.get_secret() == {"harbor_password": ""}

        # Scan: full row, decrypted
        scanner = get_registry_with_registry_row(stored)
        scanner.decrypt_secret(cipher)
        images = scanner.fetch_images_from_registry()

        assert [image.full_reference for image in images] == ["harbor.acme.io/platform/web@sha256:web"]
        assert images[0].model_dump(by_alias=True)["docker_image_size"] == "512"

    def test_encrypted_secret_is_not_usable(self, harbor_api, payload_bytes, cipher):
        """Test a handle read from a row fails auth until decrypted."""
        registry = get_registry("harbor", payload_bytes("harbor"))
        registry.encrypt_secret(cipher)
        scanner = get_registry_with_registry_row(registry.to_row())

        assert scanner.is_valid_credential() is False
        scanner.decrypt_secret(cipher)
        assert scanner.is_valid_credential() is True

    def test_key_rotation_requires_old_key(self, payload_bytes, cipher):
        """Test a row encrypted with one key cannot be read with another."""
        registry = get_registry("azure_container_registry", payload_bytes("azure_container_registry"))
        registry.encrypt_secret(cipher)
        row = registry.to_row()

        scanner = get_registry_with_registry_row(row)
        with pytest.raises(EncryptionError):
            scanner.decrypt_secret(FernetCipher(FernetCipher.generate_key()))

        scanner.decrypt_secret(cipher)
        assert scanner.get_secret() == {"azure_registry_password": "acr-pass"}


class TestGCRWorkflow:
    """GCR keeps its key document in the separately encrypted extras."""

    def test_extras_encrypted_at_rest(self, payload_bytes, sample_payloads, cipher):
        """Test the stored extras hide the key and decrypt back."""
        document = sample_payloads["google_container_registry"]["extras"]["service_account_json"]
        registry = get_registry("google_container_registry", payload_bytes("google_container_registry"))

        registry.encrypt_secret(cipher)
        registry.encrypt_extras(cipher)
        row = registry.to_row()

        assert "PRIVATE KEY" not in row.extras.decode()
        assert json.loads(row.non_secret)["project_id"] == "acme-prod"

        restored = get_registry_with_registry_row(row)
        restored.decrypt_extras(cipher)
        assert restored.get_extras()["service_account_json"] == document

        client = restored.client()
        assert client.auth.password == document

    def test_images_with_json_key(self, mock_http, payload_bytes):
        """Test GCR lists images through the distribution API."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "gcr.io" and request.url.path == "/v2/token":
                assert request.headers["authorization"].startswith("Basic ")
                return httpx.Response(200, json={"token": "gcr-token"})
            if request.headers.get("authorization") != "Bearer gcr-token":
                return httpx.Response(
                    401,
                    headers={"WWW-Authenticate": 'Bearer realm="https://gcr.io/v2/token",service="gcr.io"'},
                )
            if request.url.path == "/v2/_catalog":
                return httpx.Response(200, json={"repositories": ["acme-prod/api"]})
            return httpx.Response(200, json={"tags": ["v3"]})

        mock_http(handler)
        registry = get_registry("google_container_registry", payload_bytes("google_container_registry"))
        images = registry.fetch_images_from_registry()

        assert [image.full_reference for image in images] == ["gcr.io/acme-prod/api:v3"]
