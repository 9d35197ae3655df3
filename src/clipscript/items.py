"""Item records and their conversion to and from script values.

An item record maps MIME-like format names to byte payloads, in the order
the formats were added.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from clipscript.exceptions import MarshalError

ItemRecord = dict[str, bytes]

MIME_TEXT = "text/plain"
MIME_HTML = "text/html"
MIME_URI_LIST = "text/uri-list"


def make_item(text: str | None = None, formats: Mapping[str, Any] | None = None) -> ItemRecord:
    """Build an item record, optionally starting with a plain text payload."""
    record: ItemRecord = {}
    if text is not None:
        record[MIME_TEXT] = text.encode("utf-8")
    for mime, data in (formats or {}).items():
        record[mime] = _to_bytes(data)
    return record


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    # Anything else is carried as opaque data
    return str(value).encode("utf-8")


def to_script_value(record: Mapping[str, Any]) -> dict[str, bytes]:
    """Copy a record into the value handed to script functions.

    The copy is independent of ``record``, so a script mutating it cannot
    touch the host's data.
    """
    return {str(mime): _to_bytes(data) for mime, data in record.items()}


def from_script_value(value: Any) -> ItemRecord:
    """Convert a value returned by a script back into an item record.

    Raises:
        MarshalError: If ``value`` is not a mapping with string keys
    """
    if not isinstance(value, Mapping):
        raise MarshalError(f"Expected a mapping of formats to data, got {type(value).__name__}")

    record: ItemRecord = {}
    for mime, data in value.items():
        if not isinstance(mime, str):
            raise MarshalError(f"Format name must be a string, got {type(mime).__name__}")
        record[mime] = _to_bytes(data)
    return record


class ItemModel:
    """Ordered list of item records making up one tab."""

    def __init__(self, items: Iterable[Mapping[str, Any]] = ()) -> None:
        self._items: list[ItemRecord] = [to_script_value(item) for item in items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ItemRecord]:
        return iter(self._items)

    def __getitem__(self, row: int) -> ItemRecord:
        return self._items[row]

    def append(self, item: Mapping[str, Any]) -> None:
        self._items.append(to_script_value(item))

    def insert(self, row: int, item: Mapping[str, Any]) -> None:
        self._items.insert(row, to_script_value(item))

    def remove_rows(self, rows: Sequence[int]) -> list[ItemRecord]:
        """Remove the given rows and return the removed records."""
        removed = []
        for row in sorted(set(rows), reverse=True):
            removed.append(self._items.pop(row))
        removed.reverse()
        return removed
