"""CLI commands for plugin management."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from clipscript.config.loader import load_config
from clipscript.exceptions import ConfigError
from clipscript.plugins.registry import PluginRegistry

console = Console()

PREVIEW_LENGTH = 60


def _setup_logging(level: str) -> None:
    root = logging.getLogger("clipscript")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=console, show_path=False))


def _open_registry(config_path: str | None) -> PluginRegistry:
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    _setup_logging(config.logging.level)
    registry = PluginRegistry(config)
    registry.discover()
    return registry


def list_plugins(config_path: str | None = None) -> None:
    """List all discovered plugins."""
    registry = _open_registry(config_path)

    table = Table(title="Installed Plugins")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Priority", justify="right")
    table.add_column("Formats", style="green")
    table.add_column("Status")

    for loader in registry.loaders:
        formats = loader.formats_to_save()
        table.add_row(
            loader.id,
            escape(loader.name),
            str(loader.priority),
            ", ".join(formats) if formats else "-",
            "[green]loaded[/green]",
        )

    for plugin_id, error in sorted(registry.failed.items()):
        table.add_row(plugin_id, "-", "-", "-", f"[red]error: {escape(error[:40])}[/red]")

    console.print(table)

    if not registry.failed and len(registry.loaders) == 1:
        console.print(f"[dim]No scripts found in {registry.script_dir}.[/dim]")


def info_plugin(plugin_id: str, config_path: str | None = None) -> None:
    """Show detailed info about a plugin."""
    registry = _open_registry(config_path)

    loader = registry.get(plugin_id)
    if loader is None:
        error = registry.failed.get(plugin_id)
        if error:
            console.print(f"[red]Plugin '{plugin_id}' failed to load: {escape(error)}[/red]")
        else:
            console.print(f"[red]Plugin '{plugin_id}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{escape(loader.name)}[/bold cyan] ({loader.id})")
    if loader.description:
        console.print(f"  {escape(loader.description)}")
    if loader.author:
        console.print(f"  Author: {escape(loader.author)}")
    console.print(f"  Priority: {loader.priority}")
    console.print(f"  Icon: {loader.icon.value}")
    formats = loader.formats_to_save()
    console.print(f"  Formats: {', '.join(formats) if formats else 'none'}")


def _preview(mime: str, data: bytes) -> str:
    if not mime.startswith("text/"):
        return f"<{len(data)} bytes>"
    text = data.decode("utf-8", errors="replace").replace("\n", "\\n")
    if len(text) > PREVIEW_LENGTH:
        text = text[: PREVIEW_LENGTH - 3] + "..."
    return text


def transform_item(
    file: str,
    mime: str = "text/plain",
    copy: bool = False,
    config_path: str | None = None,
) -> None:
    """Run a single item through the composed saver chain."""
    from clipscript.items import ItemModel
    from clipscript.plugins.image import get_image_data
    from clipscript.plugins.saver import FileItemSaver

    try:
        data = Path(file).read_bytes()
    except OSError as e:
        console.print(f"[red]Cannot read {escape(file)}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    registry = _open_registry(config_path)
    saver = registry.transform_saver(FileItemSaver(registry.formats_to_save()))

    model = ItemModel()
    item_data = {mime: data}
    if copy:
        item_data = saver.copy_item(model, item_data)
    else:
        saver.transform_item_data(model, item_data)

    table = Table(title="Item")
    table.add_column("Format", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Data")
    for fmt, payload in item_data.items():
        table.add_row(fmt, str(len(payload)), escape(_preview(fmt, payload)))

    console.print(table)

    image = get_image_data(item_data)
    if image is not None:
        image_data, image_mime = image
        console.print(f"Image payload: {image_mime} ({len(image_data)} bytes)")
