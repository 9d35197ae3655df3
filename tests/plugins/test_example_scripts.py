"""Tests for the example plugin scripts shipped in examples/scripts."""

from __future__ import annotations

from pathlib import Path

from clipscript.config.schema import ClipScriptConfig, ScriptsConfig
from clipscript.items import ItemModel
from clipscript.plugins.registry import PluginRegistry
from clipscript.plugins.saver import FileItemSaver
from clipscript.scripting.bridge import LogEvent

EXAMPLES_DIR = Path(__file__).resolve().parents[2] / "examples" / "scripts"


def make_registry(events: list[LogEvent]) -> PluginRegistry:
    config = ClipScriptConfig(scripts=ScriptsConfig(directory=str(EXAMPLES_DIR)))
    registry = PluginRegistry(config, sink=events.append)
    registry.discover()
    return registry


def test_examples_load(events: list[LogEvent]):
    registry = make_registry(events)

    assert registry.failed == {}
    assert registry.get("strip_tracking").name == "Strip tracking"
    assert registry.get("tab_tools").name == "Tab tools"
    assert registry.get("tab_tools").formats_to_save() == ["text/html", "text/markdown"]


def test_strip_tracking_transform(events: list[LogEvent]):
    registry = make_registry(events)
    saver = registry.transform_saver(FileItemSaver())
    item_data = {"text/plain": b"https://example.com/page?id=3&utm_source=mail"}

    saver.transform_item_data(ItemModel(), item_data)

    assert item_data == {"text/plain": b"https://example.com/page?id=3"}
    assert [e.text for e in events] == ["removed tracking parameters"]


def test_strip_tracking_leaves_plain_text(events: list[LogEvent]):
    registry = make_registry(events)
    saver = registry.transform_saver(FileItemSaver())

    copied = saver.copy_item(ItemModel(), {"text/plain": b"just words"})

    assert copied == {"text/plain": b"just words"}
    assert events == []
