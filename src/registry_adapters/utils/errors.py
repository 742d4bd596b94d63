"""Error handling utilities for registry-adapters."""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, TypeVar

from registry_adapters.models.common import ErrorInfo

T = TypeVar("T")


class RegistryAdapterError(Exception):
    """Base exception for registry-adapters."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_error_info(self) -> ErrorInfo:
        """Convert to ErrorInfo model."""
        return ErrorInfo(code=self.code, message=self.message, details=self.details)


class UnsupportedRegistryTypeError(RegistryAdapterError):
    """Registry type tag does not match any known provider."""

    def __init__(self, registry_type: str):
        super().__init__(
            f"registry type: {registry_type}, not supported",
            code="UNSUPPORTED_REGISTRY_TYPE",
            details={"registry_type": registry_type},
        )
        self.registry_type = registry_type


class DeserializationError(RegistryAdapterError):
    """A payload or stored blob could not be decoded."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="DESERIALIZATION_ERROR", details=details)


class EncryptionError(RegistryAdapterError):
    """Encrypting or decrypting a value failed."""

    def __init__(self, message: str = "Encryption failed", field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="ENCRYPTION_ERROR", details=details)


class AuthenticationError(RegistryAdapterError):
    """Authentication failed."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_ERROR")


class ValidationError(RegistryAdapterError):
    """Validation failed."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConfigurationError(RegistryAdapterError):
    """Configuration error."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


class NetworkError(RegistryAdapterError):
    """Network operation failed."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, code="NETWORK_ERROR", details=details)


def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator to retry a function on failure.

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between retries in seconds
        backoff: Multiplier for delay after each retry
        exceptions: Tuple of exceptions to catch and retry

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None
            current_delay = delay

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt < max_attempts - 1:
                        time.sleep(current_delay)
                        current_delay *= backoff

            if last_exception:
                raise last_exception
            raise RuntimeError("Retry failed without exception")

        return wrapper

    return decorator


def safe_get(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Safely get a nested value from a dictionary.

    Args:
        data: Dictionary to get value from
        *keys: Keys to traverse
        default: Default value if key not found

    Returns:
        Value at the nested key path, or default
    """
    current = data
    for key in keys:
        if isinstance(current, dict):
            current = current.get(key)
            if current is None:
                return default
        else:
            return default
    return current
