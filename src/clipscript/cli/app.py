"""Main CLI application using Typer."""

import sys

import typer
from rich.console import Console

from clipscript import __version__

# Create Typer app
app = typer.Typer(
    name="clipscript",
    help="clipscript - Script-extensible item plugins for clipboard managers",
    no_args_is_help=True,
)

console = Console()


@app.command()
def version():
    """Show clipscript version."""
    console.print(f"clipscript version {__version__}")


@app.command()
def transform(
    file: str = typer.Argument(..., help="File whose content becomes the item payload"),
    mime: str = typer.Option("text/plain", "--format", "-f", help="Format of the payload"),
    copy: bool = typer.Option(False, "--copy", help="Run copy hooks instead of store hooks"),
    config_path: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: ~/.clipscript/clipscript.yaml)",
    ),
):
    """Run an item through the plugin saver chain and show the result."""
    from clipscript.cli.plugin_cmd import transform_item

    transform_item(file, mime=mime, copy=copy, config_path=config_path)


# Plugin commands
plugin_app = typer.Typer(help="Manage clipscript plugins")
app.add_typer(plugin_app, name="plugin")


@plugin_app.command("list")
def plugin_list(
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """List all discovered plugins."""
    from clipscript.cli.plugin_cmd import list_plugins

    list_plugins(config_path=config_path)


@plugin_app.command("info")
def plugin_info(
    plugin_id: str = typer.Argument(..., help="Plugin id"),
    config_path: str = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Show detailed information about a plugin."""
    from clipscript.cli.plugin_cmd import info_plugin

    info_plugin(plugin_id, config_path=config_path)


def main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
