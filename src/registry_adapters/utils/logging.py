"""Logging setup for registry-adapters.

All loggers live under the ``registry_adapters`` logger. Context fields
attached through :func:`get_logger_with_context` are rendered as
``key=value`` pairs by the structured formatter, with values of
credential-like keys masked.
"""

import logging
import sys
from typing import Any

ROOT_LOGGER = "registry_adapters"

MASK = "***"
SECRET_KEY_MARKERS = ("password", "secret", "token", "private_key", "service_account")


def is_secret_key(key: str) -> bool:
    """Whether a field name looks like it holds a credential."""
    key = key.lower()
    return any(marker in key for marker in SECRET_KEY_MARKERS)


def mask_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Copy of fields with credential-like values replaced by a mask."""
    return {k: (MASK if v and is_secret_key(k) else v) for k, v in fields.items()}


class StructuredFormatter(logging.Formatter):
    """Formatter that appends context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = getattr(record, "extra_fields", None)
        if not fields:
            return message
        pairs = " ".join(f"{k}={v}" for k, v in mask_fields(fields).items())
        return f"{message} {pairs}"


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    structured: bool = False,
) -> None:
    """Configure the registry_adapters logger.

    Calling it again replaces the previous handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        structured: Append context fields to each message
    """
    if format_string is None:
        if structured:
            format_string = "%(asctime)s %(levelname)s %(name)s %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    formatter_cls = StructuredFormatter if structured else logging.Formatter
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter_cls(format_string))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [handler]
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the registry_adapters logger.

    Args:
        name: Module name, e.g. ``"clients.oci"``
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter that attaches its context, plus any per-call ``extra``, as extra_fields."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        kwargs["extra"] = {"extra_fields": {**(self.extra or {}), **extra}}
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger that tags every message with context fields.

    Example:
        log = get_logger_with_context("clients.oci", registry="https://r.local")
        log.info("Listing tags", extra={"repository": "app"})
    """
    return LoggerAdapter(get_logger(name), context)
