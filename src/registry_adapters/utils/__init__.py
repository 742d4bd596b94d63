"""Utility functions for registry-adapters."""

from registry_adapters.utils.logging import configure_logging, get_logger, get_logger_with_context
from registry_adapters.utils.errors import (
    RegistryAdapterError,
    UnsupportedRegistryTypeError,
    DeserializationError,
    EncryptionError,
    AuthenticationError,
    ValidationError,
    ConfigurationError,
    NetworkError,
    retry,
    safe_get,
)
from registry_adapters.utils.encryption import FernetCipher, SecretCipher
from registry_adapters.utils.config import (
    RegistryAdaptersConfig,
    HttpConfig,
    EncryptionConfig,
    OutputConfig,
    load_config,
    save_config,
    get_config,
    set_config,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "RegistryAdapterError",
    "UnsupportedRegistryTypeError",
    "DeserializationError",
    "EncryptionError",
    "AuthenticationError",
    "ValidationError",
    "ConfigurationError",
    "NetworkError",
    "retry",
    "safe_get",
    # Encryption
    "FernetCipher",
    "SecretCipher",
    # Config
    "RegistryAdaptersConfig",
    "HttpConfig",
    "EncryptionConfig",
    "OutputConfig",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
]
