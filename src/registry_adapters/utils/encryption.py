"""Symmetric encryption of registry secrets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken

from registry_adapters.utils.errors import EncryptionError


@runtime_checkable
class SecretCipher(Protocol):
    """Protocol for the cipher used to protect secrets at rest.

    Any object with string-to-string ``encrypt`` and ``decrypt`` methods
    can be handed to a registry's encrypt/decrypt operations. Failures
    must be raised as EncryptionError.
    """

    def encrypt(self, value: str) -> str:
        """Encrypt a plaintext value."""
        ...

    def decrypt(self, value: str) -> str:
        """Decrypt a previously encrypted value."""
        ...


class FernetCipher:
    """SecretCipher backed by Fernet (AES-128-CBC with HMAC-SHA256).

    Example:
        cipher = FernetCipher(FernetCipher.generate_key())
        token = cipher.encrypt("hunter2")
        assert cipher.decrypt(token) == "hunter2"
    """

    def __init__(self, key: str | bytes) -> None:
        if isinstance(key, str):
            key = key.encode()
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise EncryptionError(f"Invalid encryption key: {e}")

    @staticmethod
    def generate_key() -> str:
        """Generate a new random key."""
        return Fernet.generate_key().decode()

    @classmethod
    def from_config(cls) -> "FernetCipher":
        """Create a cipher from the configured key.

        Raises:
            ConfigurationError: If no key is configured
        """
        from registry_adapters.utils.config import get_config

        return cls(get_config().encryption.resolve_key())

    def encrypt(self, value: str) -> str:
        try:
            return self._fernet.encrypt(value.encode()).decode()
        except (AttributeError, TypeError) as e:
            raise EncryptionError(f"Cannot encrypt value: {e}")

    def decrypt(self, value: str) -> str:
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except InvalidToken:
            raise EncryptionError("Cannot decrypt value: invalid token or wrong key")
        except (AttributeError, TypeError, UnicodeDecodeError) as e:
            raise EncryptionError(f"Cannot decrypt value: {e}")
