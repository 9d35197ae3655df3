"""Plugin system for clipscript.

Script plugins are plain Python files dropped into the scripts directory.
They wrap the built-in saver to transform items as they are copied or
stored.
"""

from clipscript.plugins.base import IconName, ItemLoader
from clipscript.plugins.image import ImageItemLoader, find_image_format, get_image_data
from clipscript.plugins.registry import PluginRegistry
from clipscript.plugins.saver import (
    FileItemSaver,
    ItemSaver,
    ScriptItemSaver,
    compose_saver,
)
from clipscript.plugins.script_loader import (
    SCRIPT_LOADER_PRIORITY,
    LoaderState,
    ScriptItemLoader,
    create_item_loader_script,
    derive_identity,
)

__all__ = [
    "SCRIPT_LOADER_PRIORITY",
    "FileItemSaver",
    "IconName",
    "ImageItemLoader",
    "ItemLoader",
    "ItemSaver",
    "LoaderState",
    "PluginRegistry",
    "ScriptItemLoader",
    "ScriptItemSaver",
    "compose_saver",
    "create_item_loader_script",
    "derive_identity",
    "find_image_format",
    "get_image_data",
]
