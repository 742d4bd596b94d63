"""Unit tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from registry_adapters import __version__
from registry_adapters.cli.main import app
from registry_adapters.clients.base import build_ingested_image
from registry_adapters.registry import RegistryQuay
from registry_adapters.utils.encryption import FernetCipher
from registry_adapters.utils.errors import AuthenticationError

runner = CliRunner()

WIDE = {"COLUMNS": "200"}


@pytest.fixture
def payload_file(tmp_path, payload_bytes):
    """Write a sample payload to disk."""

    def _write(registry_type: str) -> str:
        path = tmp_path / f"{registry_type}.json"
        path.write_bytes(payload_bytes(registry_type))
        return str(path)

    return _write


class TestMainCLI:
    """Tests for main CLI app."""

    def test_help(self):
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "registry-adapters" in result.output

    def test_version(self):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config_file(self, tmp_path):
        """Test an explicit config file that does not exist."""
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "types"])
        assert result.exit_code == 1
        assert "not found" in result.output

    @pytest.mark.parametrize("command", ["types", "validate", "images", "encrypt"])
    def test_command_help(self, command):
        """Test every command has help."""
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestTypesCommand:
    """Tests for types command."""

    def test_lists_types(self):
        """Test all short type tags are listed."""
        result = runner.invoke(app, ["types"], env=WIDE)
        assert result.exit_code == 0
        for tag in ("docker_hub", "quay", "harbor", "amazon_ecr"):
            assert tag in result.output


class TestValidateCommand:
    """Tests for validate command."""

    def test_missing_payload_file(self, tmp_path):
        """Test a missing payload file exits with an error."""
        result = runner.invoke(app, ["validate", "-t", "quay", "-p", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Payload file not found" in result.output

    def test_unknown_type(self, payload_file):
        """Test an unknown registry type exits with an error."""
        result = runner.invoke(app, ["validate", "-t", "nope", "-p", payload_file("quay")], env=WIDE)
        assert result.exit_code == 1
        assert "not supported" in result.output

    def test_missing_fields(self, tmp_path):
        """Test an incomplete payload fails without a network call."""
        path = tmp_path / "empty.json"
        path.write_text('{"name": "empty"}')

        result = runner.invoke(app, ["validate", "-t", "quay", "-p", str(path)], env=WIDE)
        assert result.exit_code == 1
        assert "FAIL" in result.output
        assert "non_secret.quay_namespace" in result.output

    def test_valid_credentials(self, payload_file):
        """Test accepted credentials exit cleanly."""
        with patch.object(RegistryQuay, "client") as client:
            client.return_value.check_credentials.return_value = True
            result = runner.invoke(app, ["validate", "-t", "quay", "-p", payload_file("quay")])

        assert result.exit_code == 0
        assert "OK" in result.output


class TestImagesCommand:
    """Tests for images command."""

    def test_json_output(self, payload_file, tmp_path):
        """Test images are written with their wire names."""
        images = [build_ingested_image("quay.io/acme/app", "1.0", digest="sha256:abc", size=42)]
        output = tmp_path / "images.json"

        with patch.object(RegistryQuay, "client") as client:
            client.return_value.list_images.return_value = images
            result = runner.invoke(
                app,
                ["images", "-t", "quay", "-p", payload_file("quay"), "-f", "json", "-o", str(output)],
            )

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data == [
            {
                "docker_image_id": "sha256:abc",
                "node_id": "quay.io/acme/app:1.0",
                "docker_image_name": "quay.io/acme/app",
                "docker_image_tag": "1.0",
                "docker_image_size": "42",
                "docker_image_created_at": "",
                "docker_image_digest": "sha256:abc",
                "metadata": {},
            }
        ]

    def test_terminal_output(self, payload_file):
        """Test the image count is printed."""
        images = [build_ingested_image("quay.io/acme/app", tag) for tag in ("1.0", "2.0")]

        with patch.object(RegistryQuay, "client") as client:
            client.return_value.list_images.return_value = images
            result = runner.invoke(app, ["images", "-t", "quay", "-p", payload_file("quay")], env=WIDE)

        assert result.exit_code == 0
        assert "2 images" in result.output

    def test_unknown_format(self, payload_file):
        """Test an unknown output format is rejected before any request."""
        with patch.object(RegistryQuay, "client") as client:
            result = runner.invoke(app, ["images", "-t", "quay", "-p", payload_file("quay"), "-f", "xml"], env=WIDE)

        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.output
        client.assert_not_called()

    def test_default_format_from_config(self, payload_file, tmp_path):
        """Test output.default_format applies when --format is omitted."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("output:\n  default_format: json\n")
        output = tmp_path / "images.json"

        with patch.object(RegistryQuay, "client") as client:
            client.return_value.list_images.return_value = []
            result = runner.invoke(
                app,
                ["--config", str(config_path), "images", "-t", "quay", "-p", payload_file("quay"), "-o", str(output)],
            )

        assert result.exit_code == 0
        assert json.loads(output.read_text()) == []

    def test_registry_error(self, payload_file):
        """Test registry failures exit with an error."""
        with patch.object(RegistryQuay, "client") as client:
            client.return_value.list_images.side_effect = AuthenticationError("token revoked")
            result = runner.invoke(app, ["images", "-t", "quay", "-p", payload_file("quay")], env=WIDE)

        assert result.exit_code == 1
        assert "token revoked" in result.output


class TestEncryptCommand:
    """Tests for encrypt command."""

    def test_encrypts_secret(self, payload_file, tmp_path):
        """Test the stored row carries decryptable secrets."""
        key = FernetCipher.generate_key()
        output = tmp_path / "row.json"

        result = runner.invoke(
            app,
            ["encrypt", "-t", "harbor", "-p", payload_file("harbor"), "-k", key, "-o", str(output)],
        )

        assert result.exit_code == 0
        row = json.loads(output.read_text())
        assert row["registry_type"] == "harbor"
        assert json.loads(row["non_secret"])["harbor_project_name"] == "platform"

        secret = json.loads(row["encrypted_secret"])
        assert secret["harbor_password"] != "harbor-pass"
        assert FernetCipher(key).decrypt(secret["harbor_password"]) == "harbor-pass"

    def test_key_from_environment(self, payload_file, tmp_path):
        """Test the key is read from the environment variable."""
        key = FernetCipher.generate_key()
        output = tmp_path / "row.json"

        result = runner.invoke(
            app,
            ["encrypt", "-t", "quay", "-p", payload_file("quay"), "-o", str(output)],
            env={"REGISTRY_ADAPTERS_ENCRYPTION_KEY": key},
        )

        assert result.exit_code == 0
        secret = json.loads(json.loads(output.read_text())["encrypted_secret"])
        assert FernetCipher(key).decrypt(secret["quay_access_token"]) == "quay-token"

    def test_key_env_from_config(self, payload_file, tmp_path):
        """Test encryption.key_env names the variable the key is read from."""
        key = FernetCipher.generate_key()
        config_path = tmp_path / "config.yaml"
        config_path.write_text("encryption:\n  key_env: SCANNER_KEY\n")
        output = tmp_path / "row.json"

        result = runner.invoke(
            app,
            ["--config", str(config_path), "encrypt", "-t", "quay", "-p", payload_file("quay"), "-o", str(output)],
            env={"SCANNER_KEY": key, "REGISTRY_ADAPTERS_ENCRYPTION_KEY": FernetCipher.generate_key()},
        )

        assert result.exit_code == 0
        secret = json.loads(json.loads(output.read_text())["encrypted_secret"])
        assert FernetCipher(key).decrypt(secret["quay_access_token"]) == "quay-token"

    def test_invalid_key(self, payload_file):
        """Test a malformed key exits with an error."""
        result = runner.invoke(
            app,
            ["encrypt", "-t", "quay", "-p", payload_file("quay"), "-k", "short"],
            env=WIDE,
        )
        assert result.exit_code == 1
        assert "ENCRYPTION_ERROR" in result.output

    def test_no_key(self, payload_file, monkeypatch):
        """Test a missing key exits with a configuration error."""
        monkeypatch.delenv("REGISTRY_ADAPTERS_ENCRYPTION_KEY", raising=False)
        result = runner.invoke(app, ["encrypt", "-t", "quay", "-p", payload_file("quay")], env=WIDE)
        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output
