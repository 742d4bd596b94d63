"""Shared utilities for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape

from registry_adapters.utils.errors import RegistryAdapterError

if TYPE_CHECKING:
    from registry_adapters.registry.base import BaseRegistry

# Shared console instance
console = Console()


def load_registry(registry_type: str, payload_file: Path) -> "BaseRegistry":
    """Build a registry handle from a payload file, exiting on failure."""
    from registry_adapters.registry.factory import get_registry

    if not payload_file.exists():
        console.print(f"[red]Error:[/red] Payload file not found: {payload_file}")
        raise typer.Exit(1)

    try:
        return get_registry(registry_type, payload_file.read_bytes())
    except RegistryAdapterError as e:
        exit_with_error(e)


def exit_with_error(error: RegistryAdapterError) -> NoReturn:
    """Print an adapter error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(error.to_error_info()))}")
    raise typer.Exit(1)


def output_json(data: Any, output: Path | None = None) -> None:
    """Output data as JSON to console or file.

    Args:
        data: Data to output (dict, list or Pydantic model)
        output: Optional output file path
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)

    json_str = json.dumps(data, indent=2, default=str)

    if output:
        output.write_text(json_str)
        console.print(f"Written to {output}")
    else:
        console.print_json(json_str)


def status_icon(success: bool) -> str:
    """Get a colored status icon."""
    return "[green]OK[/green]" if success else "[red]FAIL[/red]"
