"""Item savers and the script decorator that wraps them.

A saver persists a tab of items and gets a chance to alter item data when
items are copied or stored. Script plugins never replace the built-in saver;
they wrap it so their transforms run after it.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Sequence
from typing import IO, Any

from clipscript.exceptions import MarshalError
from clipscript.items import ItemModel, ItemRecord, from_script_value, to_script_value
from clipscript.scripting.resolver import find_function, get_function
from clipscript.scripting.sandbox import ScriptSandbox

logger = logging.getLogger(__name__)

SAVE_FORMAT_VERSION = 1


class ItemSaver:
    """Persistence handler for one tab.

    Everything except :meth:`save_items` has a permissive default.
    """

    def save_items(self, tab_name: str, model: ItemModel, file: IO[bytes]) -> bool:
        raise NotImplementedError

    def can_remove_items(self, indexes: Sequence[int]) -> bool:
        return True

    def can_move_items(self, indexes: Sequence[int]) -> bool:
        return True

    def items_removed_by_user(self, indexes: Sequence[int]) -> None:
        pass

    def copy_item(self, model: ItemModel, item_data: ItemRecord) -> ItemRecord:
        """Return the data a copy of ``item_data`` should carry."""
        return dict(item_data)

    def transform_item_data(self, model: ItemModel, item_data: ItemRecord) -> None:
        """Adjust ``item_data`` in place before it is stored."""


class FileItemSaver(ItemSaver):
    """Built-in saver writing a tab as a JSON document.

    Args:
        formats: If given, only these formats are written
    """

    def __init__(self, formats: Sequence[str] | None = None) -> None:
        self.formats = list(formats) if formats is not None else None

    def save_items(self, tab_name: str, model: ItemModel, file: IO[bytes]) -> bool:
        items = []
        for item in model:
            items.append(
                {
                    mime: base64.b64encode(data).decode("ascii")
                    for mime, data in item.items()
                    if self.formats is None or mime in self.formats
                }
            )

        document = {"version": SAVE_FORMAT_VERSION, "tab": tab_name, "items": items}
        try:
            file.write(json.dumps(document).encode("utf-8"))
        except OSError as e:
            logger.error("Failed to save tab '%s': %s", tab_name, e)
            return False

        logger.debug("Saved %d items in tab '%s'", len(items), tab_name)
        return True

    @staticmethod
    def load_items(file: IO[bytes]) -> tuple[str, ItemModel]:
        """Read a tab written by :meth:`save_items`.

        Returns:
            Tuple of (tab name, model)

        Raises:
            ValueError: If the data is not a saved tab
        """
        document = json.loads(file.read().decode("utf-8"))
        if not isinstance(document, dict) or "items" not in document:
            raise ValueError("Not a saved tab")

        model = ItemModel(
            {mime: base64.b64decode(data) for mime, data in item.items()}
            for item in document["items"]
        )
        return document.get("tab", ""), model


class ScriptItemSaver(ItemSaver):
    """Decorator applying a script's ``copyItem``/``transformItemData`` hooks.

    The inner saver always runs first and its result is kept whenever the
    script hook is missing, raises, or returns nothing usable. The node holds
    plain references to the inner saver and the handler object; it owns
    neither.
    """

    def __init__(self, saver: ItemSaver, handler: Any, sandbox: ScriptSandbox) -> None:
        self._saver = saver
        self._handler = handler
        self._sandbox = sandbox

    @property
    def inner(self) -> ItemSaver:
        return self._saver

    def save_items(self, tab_name: str, model: ItemModel, file: IO[bytes]) -> bool:
        return self._saver.save_items(tab_name, model, file)

    def can_remove_items(self, indexes: Sequence[int]) -> bool:
        return self._saver.can_remove_items(indexes)

    def can_move_items(self, indexes: Sequence[int]) -> bool:
        return self._saver.can_move_items(indexes)

    def items_removed_by_user(self, indexes: Sequence[int]) -> None:
        self._saver.items_removed_by_user(indexes)

    def copy_item(self, model: ItemModel, item_data: ItemRecord) -> ItemRecord:
        item_data2 = self._saver.copy_item(model, item_data)
        return self._apply_script("copyItem", item_data2)

    def transform_item_data(self, model: ItemModel, item_data: ItemRecord) -> None:
        self._saver.transform_item_data(model, item_data)
        result = self._apply_script("transformItemData", item_data)
        if result is not item_data:
            item_data.clear()
            item_data.update(result)

    def _apply_script(self, fn_name: str, item_data: ItemRecord) -> ItemRecord:
        fn = find_function(self._sandbox.context, self._handler, fn_name)
        if fn is None:
            return item_data

        result = self._sandbox.call(fn, to_script_value(item_data))
        if not result.ok or result.value is None:
            return item_data

        # Converting may run script code (__str__, a custom items())
        context = self._sandbox.context
        converted = context.call(from_script_value, result.value)
        if converted.fault is not None and isinstance(converted.fault.exception, MarshalError):
            context.clear_exceptions()
            self._sandbox.bridge.warning(
                f"{fn_name}() returned invalid item data: {converted.fault.exception}"
            )
            return item_data
        if context.process_uncaught_exception():
            return item_data
        return converted.value


def _has_hooks(handler: Any) -> bool:
    return bool(get_function(handler, "copyItem") or get_function(handler, "transformItemData"))


def compose_saver(saver: ItemSaver, handler: Any, sandbox: ScriptSandbox) -> ItemSaver:
    """Wrap ``saver`` with a script's hooks if the handler defines any."""
    hooks = sandbox.call(_has_hooks, handler)
    if hooks.ok and hooks.value:
        return ScriptItemSaver(saver, handler, sandbox)
    return saver
