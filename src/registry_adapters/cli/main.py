"""Main CLI entry point for registry-adapters."""

from pathlib import Path
from typing import Optional

import typer

from registry_adapters.cli import registry
from registry_adapters.cli.utils import console

app = typer.Typer(
    name="registry-adapters",
    help="Validate credentials and list images across container registries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register subcommands
app.command(name="types")(registry.types_cmd)
app.command(name="validate")(registry.validate_cmd)
app.command(name="images")(registry.images_cmd)
app.command(name="encrypt")(registry.encrypt_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a config file"),
    structured_logs: bool = typer.Option(
        False, "--structured-logs", help="Append context fields to log lines"
    ),
) -> None:
    """
    registry-adapters: credentials and image listing for container registries.

    - [bold]types[/bold]: Show supported registry types
    - [bold]validate[/bold]: Check registry credentials
    - [bold]images[/bold]: List images in a registry
    - [bold]encrypt[/bold]: Produce the encrypted stored form of a payload
    """
    from registry_adapters.utils.config import get_config, load_config, set_config
    from registry_adapters.utils.errors import RegistryAdapterError
    from registry_adapters.utils.logging import configure_logging

    if config is not None:
        try:
            set_config(load_config(config))
        except (FileNotFoundError, RegistryAdapterError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    output_config = get_config().output
    if verbose or (output_config.verbose and not quiet):
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    configure_logging(level=level, structured=structured_logs)

    if not output_config.color:
        console.no_color = True


@app.command()
def version() -> None:
    """Show the registry-adapters version."""
    from registry_adapters import __version__

    console.print(f"registry-adapters version {__version__}")


if __name__ == "__main__":
    app()
