"""Item loader backed by a user script.

The script is read and evaluated once, when the loader is created. It is
expected to define a top-level ``clipscript_plugin`` function returning an
object; the members the loader looks for on that object are all optional::

    def clipscript_plugin():
        return {
            "name": "Upper",
            "author": "me",
            "formatsToSave": ["text/plain"],
            "transformItemData": lambda item: {
                k: v.upper() for k, v in item.items()
            },
        }
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Any

from clipscript.plugins.base import IconName, ItemLoader
from clipscript.plugins.saver import ItemSaver, compose_saver
from clipscript.scripting.bridge import LogSink, MessageBridge
from clipscript.scripting.sandbox import ItemScriptable, ScriptSandbox, ScriptSource

logger = logging.getLogger(__name__)

SCRIPT_LOADER_PRIORITY = 20

_INVALID_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


class LoaderState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def base_name(path: str | Path) -> str:
    """File name up to the first dot (``"a.b.py"`` -> ``"a"``)."""
    return Path(path).name.split(".", 1)[0]


def derive_identity(path: str | Path) -> str:
    """Stable plugin id built from a script's file name."""
    return _INVALID_ID_CHARS.sub("_", base_name(path))


class ScriptItemLoader(ItemLoader):
    """Loader whose metadata and saver hooks come from a script."""

    priority = SCRIPT_LOADER_PRIORITY

    def __init__(
        self,
        script_path: str | Path,
        bridge: MessageBridge | None = None,
        sink: LogSink | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.script_path = Path(script_path)
        self._base_name = base_name(self.script_path)
        self._id = derive_identity(self.script_path)
        self.bridge = bridge or MessageBridge(self._id, sink=sink)
        self.sandbox = ScriptSandbox(self._id, self.bridge)
        self.state = LoaderState.UNLOADED
        self._load(encoding)

    def _load(self, encoding: str) -> None:
        self.state = LoaderState.LOADING

        try:
            text = ScriptSource.read(self.script_path, encoding=encoding).text
        except (OSError, UnicodeDecodeError) as e:
            self.bridge.error(f'Failed to open "{self.script_path}": {e}')
            self.state = LoaderState.FAILED
            return

        if self.sandbox.load(text, self.script_path):
            self.state = LoaderState.LOADED
            logger.debug("Loaded script plugin '%s' from %s", self._id, self.script_path)
        else:
            self.state = LoaderState.FAILED

    def is_loaded(self) -> bool:
        """Return True only if the script produced a usable handler object."""
        return self.state is LoaderState.LOADED and self.sandbox.is_loaded()

    @property
    def handler(self) -> Any:
        return self.sandbox.handler

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._string_value("name", self._base_name)

    @property
    def author(self) -> str:
        return self._string_value("author")

    @property
    def description(self) -> str:
        return self._string_value("description")

    @property
    def icon(self) -> IconName:
        return IconName.COG

    def formats_to_save(self) -> list[str]:
        resolution = self.sandbox.resolve("formatsToSave")
        if not resolution.ok:
            return []
        # Iterating may run script code (e.g. a generator)
        result = self.sandbox.call(_to_string_list, resolution.value)
        return result.value if result.ok else []

    def wrap_saver(self, saver: ItemSaver) -> ItemSaver:
        return compose_saver(saver, self.sandbox.handler, self.sandbox)

    def create_item_scriptable(self) -> ItemScriptable:
        return self.sandbox.create_item_scriptable()

    def _string_value(self, name: str, default: str = "") -> str:
        resolution = self.sandbox.resolve(name)
        if not resolution.ok or resolution.value is None:
            return default

        # str() may run script code
        result = self.sandbox.call(_to_text, resolution.value)
        if not result.ok:
            return default
        return result.value or default


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _to_string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (bytes, bytearray)):
        return [bytes(value).decode("utf-8", errors="replace")]
    if not isinstance(value, Iterable):
        return []
    return [str(item) for item in value if item is not None]


def create_item_loader_script(
    script_path: str | Path,
    bridge: MessageBridge | None = None,
    sink: LogSink | None = None,
) -> ScriptItemLoader | None:
    """Create a loader for ``script_path``, or None if the script is unusable."""
    loader = ScriptItemLoader(script_path, bridge=bridge, sink=sink)
    if loader.is_loaded():
        return loader
    return None
