"""Unit tests for secret encryption."""

import pytest

from registry_adapters.utils.config import EncryptionConfig, RegistryAdaptersConfig, set_config
from registry_adapters.utils.encryption import FernetCipher, SecretCipher
from registry_adapters.utils.errors import ConfigurationError, EncryptionError


class TestFernetCipher:
    """Tests for FernetCipher."""

    def test_round_trip(self, cipher):
        """Test a value decrypts to itself."""
        token = cipher.encrypt("hunter2")
        assert token != "hunter2"
        assert cipher.decrypt(token) == "hunter2"

    def test_unicode_round_trip(self, cipher):
        """Test non-ASCII secrets survive."""
        assert cipher.decrypt(cipher.encrypt("pässwörd-🔑")) == "pässwörd-🔑"

    def test_tokens_are_randomized(self, cipher):
        """Test encrypting twice gives different tokens."""
        assert cipher.encrypt("same") != cipher.encrypt("same")

    def test_satisfies_protocol(self, cipher):
        """Test FernetCipher is a SecretCipher."""
        assert isinstance(cipher, SecretCipher)

    def test_accepts_bytes_key(self):
        """Test the key may be given as bytes."""
        key = FernetCipher.generate_key()
        cipher = FernetCipher(key.encode())
        assert FernetCipher(key).decrypt(cipher.encrypt("x")) == "x"

    def test_invalid_key(self):
        """Test a malformed key is rejected."""
        with pytest.raises(EncryptionError, match="Invalid encryption key"):
            FernetCipher("not-a-key")

    def test_wrong_key(self, cipher):
        """Test a token from another key fails to decrypt."""
        token = FernetCipher(FernetCipher.generate_key()).encrypt("hunter2")
        with pytest.raises(EncryptionError, match="invalid token"):
            cipher.decrypt(token)

    def test_plaintext_is_not_a_token(self, cipher):
        """Test decrypting a plaintext value fails."""
        with pytest.raises(EncryptionError):
            cipher.decrypt("hunter2")

    def test_error_hides_value(self, cipher):
        """Test the error message does not contain the input."""
        with pytest.raises(EncryptionError) as exc_info:
            cipher.decrypt("hunter2")
        assert "hunter2" not in str(exc_info.value)


class TestFromConfig:
    """Tests for building a cipher from configuration."""

    def test_key_from_config(self):
        """Test the configured key is used."""
        key = FernetCipher.generate_key()
        set_config(RegistryAdaptersConfig(encryption=EncryptionConfig(key=key)))

        token = FernetCipher.from_config().encrypt("hunter2")
        assert FernetCipher(key).decrypt(token) == "hunter2"

    def test_key_from_environment(self, monkeypatch):
        """Test the key environment variable is used."""
        key = FernetCipher.generate_key()
        monkeypatch.setenv("REGISTRY_ADAPTERS_ENCRYPTION_KEY", key)

        token = FernetCipher.from_config().encrypt("hunter2")
        assert FernetCipher(key).decrypt(token) == "hunter2"

    def test_no_key(self, monkeypatch):
        """Test a missing key is reported as configuration error."""
        monkeypatch.delenv("REGISTRY_ADAPTERS_ENCRYPTION_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            FernetCipher.from_config()
