"""Built-in loader for image items.

Rendering is left to the host's widgets; this loader only declares which
image formats are worth storing and how to pick the image payload of an item.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from clipscript.plugins.base import IconName, ItemLoader

IMAGE_LOADER_PRIORITY = 15

# Checked in this order
IMAGE_FORMATS = (
    "image/png",
    "image/bmp",
    "image/jpeg",
    "image/gif",
    "image/svg+xml",
)


def find_image_format(formats: Iterable[str]) -> str | None:
    """Return the preferred image format among ``formats``."""
    available = set(formats)
    for mime in IMAGE_FORMATS:
        if mime in available:
            return mime
    return None


def get_image_data(item_data: Mapping[str, bytes]) -> tuple[bytes, str] | None:
    """Return ``(data, mime)`` of the item's image payload, if any."""
    mime = find_image_format(item_data.keys())
    if mime is None:
        return None
    return bytes(item_data[mime]), mime


class ImageItemLoader(ItemLoader):
    """Declares image formats to save; never transforms item data."""

    priority = IMAGE_LOADER_PRIORITY

    @property
    def id(self) -> str:
        return "itemimage"

    @property
    def name(self) -> str:
        return "Images"

    @property
    def author(self) -> str:
        return "clipscript"

    @property
    def description(self) -> str:
        return "Keeps image data of items."

    @property
    def icon(self) -> IconName:
        return IconName.IMAGE

    def formats_to_save(self) -> list[str]:
        return ["image/svg+xml", "image/png", "image/gif"]
