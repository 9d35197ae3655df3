"""Base interface for item loaders."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from clipscript.items import ItemModel

if TYPE_CHECKING:
    from clipscript.plugins.saver import ItemSaver
    from clipscript.scripting.sandbox import ItemScriptable


class IconName(str, Enum):
    """Symbolic icons the host knows how to draw."""

    DEFAULT = "default"
    COG = "cog"
    IMAGE = "image"


class ItemLoader:
    """A plugin able to handle, save or transform items.

    When several loaders can handle the same item, the one with the higher
    :attr:`priority` wins.
    """

    priority: int = 0

    @property
    def id(self) -> str:
        raise NotImplementedError

    @property
    def name(self) -> str:
        return self.id

    @property
    def author(self) -> str:
        return ""

    @property
    def description(self) -> str:
        return ""

    @property
    def icon(self) -> IconName:
        return IconName.DEFAULT

    def formats_to_save(self) -> list[str]:
        return []

    def wrap_saver(self, saver: ItemSaver) -> ItemSaver:
        """Return a saver that applies this loader's transforms around ``saver``."""
        return saver

    def transform_saver(self, saver: ItemSaver, model: ItemModel | None = None) -> ItemSaver:
        return self.wrap_saver(saver)

    def create_item_scriptable(self) -> ItemScriptable | None:
        return None
