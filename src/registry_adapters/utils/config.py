"""Configuration file support for registry-adapters."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from registry_adapters.utils.errors import ConfigurationError

DEFAULT_KEY_ENV = "REGISTRY_ADAPTERS_ENCRYPTION_KEY"


class HttpConfig(BaseModel):
    """Settings shared by the registry HTTP clients."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Transport-level connection retries")
    verify_tls: bool = Field(default=True, description="Verify registry TLS certificates")


class EncryptionConfig(BaseModel):
    """Where the secret cipher key comes from."""

    key: str | None = Field(default=None, description="Fernet key (urlsafe base64)")
    key_env: str = Field(default=DEFAULT_KEY_ENV, description="Environment variable holding the key")

    def resolve_key(self) -> str:
        """Return the configured key, falling back to the environment.

        Raises:
            ConfigurationError: If no key is configured anywhere
        """
        if self.key:
            return self.key
        key = os.environ.get(self.key_env)
        if key:
            return key
        raise ConfigurationError(
            f"No encryption key configured. Set {self.key_env} or encryption.key.",
            config_key="encryption.key",
        )


class OutputConfig(BaseModel):
    """Output configuration."""

    default_format: str = Field(default="terminal", description="Default output format")
    color: bool = Field(default=True, description="Enable color output")
    verbose: bool = Field(default=False, description="Verbose output")


class RegistryAdaptersConfig(BaseModel):
    """Main configuration for registry-adapters."""

    http: HttpConfig = Field(default_factory=HttpConfig)
    encryption: EncryptionConfig = Field(default_factory=EncryptionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def get_config_paths() -> list[Path]:
    """Get possible configuration file paths.

    Returns:
        List of paths to check for configuration files
    """
    paths = []

    paths.append(Path.cwd() / ".registry-adapters.yaml")
    paths.append(Path.cwd() / ".registry-adapters.yml")
    paths.append(Path.cwd() / "registry-adapters.yaml")

    home = Path.home()
    paths.append(home / ".registry-adapters.yaml")
    paths.append(home / ".config" / "registry-adapters" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "registry-adapters" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> RegistryAdaptersConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise FileNotFoundError(f"Config file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return RegistryAdaptersConfig()


def _load_config_file(path: Path) -> RegistryAdaptersConfig:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")

    if data is None:
        return RegistryAdaptersConfig()
    try:
        return RegistryAdaptersConfig.model_validate(data)
    except ValueError as e:
        raise ConfigurationError(f"Failed to load config file {path}: {e}")


def save_config(config: RegistryAdaptersConfig, config_path: Path | str | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to. Defaults to ~/.config/registry-adapters/config.yaml

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "registry-adapters" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    return config_path


def get_default_config() -> RegistryAdaptersConfig:
    """Get the default configuration."""
    return RegistryAdaptersConfig()


# Global config instance
_config: RegistryAdaptersConfig | None = None


def get_config() -> RegistryAdaptersConfig:
    """Get the global configuration instance.

    Loads from file on first call.

    Returns:
        Global configuration
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: RegistryAdaptersConfig | None) -> None:
    """Set the global configuration instance.

    Passing None forces the next get_config() call to reload from disk.

    Args:
        config: Configuration to set
    """
    global _config
    _config = config
