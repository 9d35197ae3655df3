"""Plugin discovery and saver composition.

Discovers script plugins from the configured directory (drop-in files) and
combines them with the built-in loaders. Scripts that fail to load are
remembered with the reason and otherwise ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from clipscript.config.schema import ClipScriptConfig
from clipscript.plugins.base import ItemLoader
from clipscript.plugins.image import ImageItemLoader
from clipscript.plugins.saver import ItemSaver
from clipscript.plugins.script_loader import ScriptItemLoader, derive_identity
from clipscript.scripting.bridge import LogEvent, LogSink, Severity, log_to_logger

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Ordered collection of the item loaders available to the host."""

    def __init__(
        self,
        config: ClipScriptConfig | None = None,
        sink: LogSink | None = None,
    ) -> None:
        self.config = config or ClipScriptConfig()
        self.script_dir = Path(self.config.scripts.directory).expanduser()
        self.blocked = set(self.config.scripts.blocked)
        self._sink = sink or log_to_logger
        self._loaders: list[ItemLoader] = []
        self.failed: dict[str, str] = {}

    @property
    def loaders(self) -> list[ItemLoader]:
        """Loaders ordered by descending priority, then id."""
        return list(self._loaders)

    def discover(self) -> list[ItemLoader]:
        """Load built-in loaders and every script plugin.

        Returns:
            Loaders in priority order
        """
        self._loaders = [ImageItemLoader()]
        self.failed = {}

        if self.config.scripts.enabled:
            self._discover_scripts()

        self._loaders.sort(key=lambda loader: (-loader.priority, loader.id))
        return self.loaders

    def _discover_scripts(self) -> None:
        if not self.script_dir.is_dir():
            logger.debug("Script directory %s does not exist", self.script_dir)
            return

        for path in sorted(self.script_dir.glob(self.config.scripts.pattern)):
            if path.name.startswith("_") or not path.is_file():
                continue

            plugin_id = derive_identity(path)
            if plugin_id in self.blocked:
                logger.info("Plugin '%s' is blocked, skipping", plugin_id)
                continue

            if self.get(plugin_id) is not None:
                logger.warning("Duplicate plugin id '%s' from %s, skipping", plugin_id, path)
                continue

            self._load_script(path, plugin_id)

    def _load_script(self, path: Path, plugin_id: str) -> None:
        problems: list[str] = []

        def sink(event: LogEvent) -> None:
            if event.severity is not Severity.NOTE:
                problems.append(event.text)
            self._sink(event)

        loader = ScriptItemLoader(path, sink=sink, encoding=self.config.scripts.encoding)
        if not loader.is_loaded():
            self.failed[plugin_id] = problems[-1] if problems else "not loaded"
            logger.warning("Failed to load plugin '%s' from %s", plugin_id, path)
            return

        self._loaders.append(loader)
        logger.info("Loaded plugin '%s' (script) from %s", plugin_id, path)

    def get(self, plugin_id: str) -> ItemLoader | None:
        for loader in self._loaders:
            if loader.id == plugin_id:
                return loader
        return None

    def formats_to_save(self) -> list[str]:
        """Formats requested by any loader, followed by configured extras."""
        formats: list[str] = []
        for loader in self._loaders:
            formats.extend(loader.formats_to_save())
        formats.extend(self.config.saver.formats_to_save)
        return list(dict.fromkeys(formats))

    def transform_saver(self, saver: ItemSaver) -> ItemSaver:
        """Wrap ``saver`` with every loader's transforms.

        The chain is built anew on each call; lower priority loaders wrap
        first so the highest priority transform runs last.
        """
        for loader in reversed(self._loaders):
            saver = loader.wrap_saver(saver)
        return saver
