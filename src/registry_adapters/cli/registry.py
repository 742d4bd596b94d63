"""CLI commands operating on registry payloads."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from registry_adapters.cli.utils import (
    console,
    exit_with_error,
    load_registry,
    output_json,
    status_icon,
)
from registry_adapters.utils.errors import RegistryAdapterError, ValidationError

TYPE_OPTION = typer.Option(..., "--type", "-t", help="Registry type tag (see 'types')")
PAYLOAD_OPTION = typer.Option(..., "--payload", "-p", help="JSON payload file")
OUTPUT_FORMATS = ("terminal", "json")


def types_cmd() -> None:
    """List supported registry types and their fields."""
    from registry_adapters.registry.factory import get_default_factory

    table = Table(title="Supported registry types")
    table.add_column("Type", style="cyan")
    table.add_column("Non-secret fields")
    table.add_column("Secret fields")
    table.add_column("Extras")

    for registry_cls in get_default_factory():
        registry = registry_cls()
        table.add_row(
            registry.get_registry_type(),
            ", ".join(registry.get_non_secret()),
            ", ".join(registry.get_secret()),
            ", ".join(registry.get_extras()) or "-",
        )

    console.print(table)


def validate_cmd(
    registry_type: str = TYPE_OPTION,
    payload: Path = PAYLOAD_OPTION,
) -> None:
    """
    Check registry credentials.

    Example:
        registry-adapters validate --type docker_hub --payload hub.json
    """
    registry = load_registry(registry_type, payload)

    missing = registry.missing_fields()
    with console.status("Checking credentials..."):
        valid = registry.is_valid_credential()

    console.print(f"{status_icon(valid)} {escape(registry.name or registry.get_registry_type())}")
    if missing:
        console.print(f"  Missing fields: {', '.join(missing)}")
    if not valid:
        raise typer.Exit(1)


def images_cmd(
    registry_type: str = TYPE_OPTION,
    payload: Path = PAYLOAD_OPTION,
    format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (terminal, json); defaults to output.default_format",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (json format)",
    ),
) -> None:
    """
    List the images in a registry.

    Example:
        registry-adapters images --type quay --payload quay.json --format json
    """
    from registry_adapters.utils.config import get_config

    format = format or get_config().output.default_format
    if format not in OUTPUT_FORMATS:
        expected = ", ".join(OUTPUT_FORMATS)
        exit_with_error(
            ValidationError(f"Unknown format '{format}', expected one of: {expected}", field="format")
        )

    registry = load_registry(registry_type, payload)

    try:
        with console.status("Fetching images..."):
            images = registry.fetch_images_from_registry()
    except RegistryAdapterError as e:
        exit_with_error(e)

    if format == "json":
        output_json([image.model_dump(mode="json", by_alias=True) for image in images], output)
        return

    table = Table(title=f"Images in {escape(registry.name or registry.get_registry_type())}")
    table.add_column("Image", style="cyan")
    table.add_column("Tag")
    table.add_column("Digest")
    table.add_column("Size", justify="right")
    table.add_column("Created")
    for image in images:
        table.add_row(image.name, image.tag, image.digest or "-", image.size, image.created_at)
    console.print(table)
    console.print(f"{len(images)} images")


def encrypt_cmd(
    registry_type: str = TYPE_OPTION,
    payload: Path = PAYLOAD_OPTION,
    key: Optional[str] = typer.Option(
        None,
        "--key",
        "-k",
        help="Fernet key (defaults to the configured key)",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path"),
) -> None:
    """
    Encrypt a payload into the stored row format.

    Example:
        registry-adapters encrypt --type harbor --payload harbor.json --key $KEY
    """
    from registry_adapters.utils.encryption import FernetCipher

    registry = load_registry(registry_type, payload)

    try:
        cipher = FernetCipher(key) if key else FernetCipher.from_config()
        registry.encrypt_secret(cipher)
        registry.encrypt_extras(cipher)
    except RegistryAdapterError as e:
        exit_with_error(e)

    row = registry.to_row()
    output_json(
        {
            "name": row.name,
            "registry_type": row.registry_type,
            "non_secret": row.non_secret.decode(),
            "encrypted_secret": row.encrypted_secret.decode(),
            "extras": row.extras.decode(),
        },
        output,
    )
