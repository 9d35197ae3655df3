"""Tests for script-backed item loaders."""

from __future__ import annotations

from pathlib import Path

import pytest

from clipscript.plugins.base import IconName
from clipscript.plugins.saver import FileItemSaver, ScriptItemSaver
from clipscript.plugins.script_loader import (
    SCRIPT_LOADER_PRIORITY,
    LoaderState,
    ScriptItemLoader,
    base_name,
    create_item_loader_script,
    derive_identity,
)
from clipscript.scripting.bridge import LogEvent, Severity

METADATA_SCRIPT = '''
def clipscript_plugin():
    return {
        "name": "Uppercase",
        "author": "Jane",
        "description": lambda: "Makes " + "text louder",
        "formatsToSave": lambda: ["image/png", "image/gif"],
    }
'''

CLASS_SCRIPT = '''
class Plugin:
    name = "Classy"

    def formatsToSave(self):
        return ("text/plain",)

    def transformItemData(self, item):
        item["text/plain"] = item["text/plain"].upper()
        return item

clipscript_plugin = Plugin
'''


class TestIdentity:
    def test_base_name_strips_all_suffixes(self):
        assert base_name("/tmp/archive.tar.py") == "archive"

    def test_derive_identity_replaces_invalid_chars(self):
        assert derive_identity("my plugin!.js") == "my_plugin_"
        assert derive_identity("/scripts/Tab-Tools 2.py") == "Tab_Tools_2"

    def test_identity_is_deterministic(self):
        assert derive_identity("a b.py") == derive_identity(Path("/other/a b.py"))


class TestScriptItemLoader:
    def test_metadata(self, write_script, events: list[LogEvent]):
        loader = ScriptItemLoader(write_script(METADATA_SCRIPT, "upper case.py"), sink=events.append)

        assert loader.is_loaded()
        assert loader.state is LoaderState.LOADED
        assert loader.id == "upper_case"
        assert loader.name == "Uppercase"
        assert loader.author == "Jane"
        assert loader.description == "Makes text louder"
        assert loader.icon is IconName.COG
        assert loader.formats_to_save() == ["image/png", "image/gif"]
        assert events == []

    def test_priority_constant(self, write_script):
        first = ScriptItemLoader(write_script(METADATA_SCRIPT, "a.py"))
        second = ScriptItemLoader(write_script("", "b.py"))

        assert first.priority == SCRIPT_LOADER_PRIORITY == 20
        assert second.priority == 20

    def test_name_falls_back_to_base_name(self, write_script):
        loader = ScriptItemLoader(write_script("clipscript_plugin = {}", "tidy.urls.py"))

        assert loader.is_loaded()
        assert loader.name == "tidy"
        assert loader.author == ""
        assert loader.description == ""
        assert loader.formats_to_save() == []

    @pytest.mark.parametrize("value", ["''", "None"])
    def test_empty_name_falls_back(self, write_script, value):
        loader = ScriptItemLoader(write_script(f"clipscript_plugin = {{'name': {value}}}", "x.py"))

        assert loader.name == "x"

    def test_non_text_name_converted(self, write_script):
        loader = ScriptItemLoader(write_script("clipscript_plugin = {'name': 7}", "x.py"))

        assert loader.name == "7"

    def test_raising_name_falls_back(self, write_script, events: list[LogEvent]):
        source = (
            "def boom():\n"
            "    raise RuntimeError('no name')\n"
            "clipscript_plugin = {'name': boom}\n"
        )
        loader = ScriptItemLoader(write_script(source, "boom.py"), sink=events.append)

        assert loader.name == "boom"
        assert [e.severity for e in events] == [Severity.WARNING]
        assert events[0].source == "boom"

    def test_unprintable_name_falls_back(self, write_script, events: list[LogEvent]):
        source = (
            "class Unprintable:\n"
            "    def __str__(self):\n"
            "        raise RuntimeError('boom')\n"
            "clipscript_plugin = {'name': Unprintable(), 'author': Unprintable()}\n"
        )
        loader = ScriptItemLoader(write_script(source, "plugin.py"), sink=events.append)

        assert loader.name == "plugin"
        assert loader.author == ""
        assert [e.severity for e in events] == [Severity.WARNING, Severity.WARNING]
        assert "RuntimeError: boom" in events[0].text

    def test_class_handler(self, write_script):
        loader = ScriptItemLoader(write_script(CLASS_SCRIPT, "classy.py"))

        assert loader.is_loaded()
        assert loader.name == "Classy"
        assert loader.formats_to_save() == ["text/plain"]

    def test_formats_single_string(self, write_script):
        loader = ScriptItemLoader(write_script("clipscript_plugin = {'formatsToSave': 'text/html'}"))

        assert loader.formats_to_save() == ["text/html"]

    def test_formats_not_iterable(self, write_script):
        loader = ScriptItemLoader(write_script("clipscript_plugin = {'formatsToSave': 5}"))

        assert loader.formats_to_save() == []

    def test_formats_generator_error(self, write_script, events: list[LogEvent]):
        source = (
            "def formats():\n"
            "    yield 'text/plain'\n"
            "    raise ValueError('halfway')\n"
            "clipscript_plugin = {'formatsToSave': lambda: formats()}\n"
        )
        loader = ScriptItemLoader(write_script(source), sink=events.append)

        assert loader.formats_to_save() == []
        assert len(events) == 1

    def test_empty_script_not_loaded(self, write_script, events: list[LogEvent]):
        loader = ScriptItemLoader(write_script(""), sink=events.append)

        assert loader.is_loaded() is False
        assert loader.state is LoaderState.FAILED
        assert len(events) == 1

    def test_missing_factory_not_loaded(self, write_script):
        loader = ScriptItemLoader(write_script("name = 'orphan'"))

        assert loader.is_loaded() is False

    def test_missing_file(self, tmp_path: Path, events: list[LogEvent]):
        loader = ScriptItemLoader(tmp_path / "gone.py", sink=events.append)

        assert loader.is_loaded() is False
        assert loader.state is LoaderState.FAILED
        assert loader.id == "gone"
        assert [e.severity for e in events] == [Severity.ERROR]
        assert "Failed to open" in events[0].text

    def test_syntax_error(self, write_script, events: list[LogEvent]):
        loader = ScriptItemLoader(write_script("def clipscript_plugin(:\n"), sink=events.append)

        assert loader.is_loaded() is False
        assert events[0].severity is Severity.WARNING

    def test_wrap_saver_passthrough(self, write_script):
        loader = ScriptItemLoader(write_script(METADATA_SCRIPT))
        saver = FileItemSaver()

        assert loader.wrap_saver(saver) is saver
        assert loader.transform_saver(saver) is saver

    @pytest.mark.parametrize("hook", ["copyItem", "transformItemData"])
    def test_wrap_saver_with_hook(self, write_script, hook):
        loader = ScriptItemLoader(write_script(f"clipscript_plugin = {{'{hook}': lambda item: item}}"))
        saver = FileItemSaver()

        wrapped = loader.wrap_saver(saver)

        assert isinstance(wrapped, ScriptItemSaver)
        assert wrapped.inner is saver

    def test_wrap_saver_builds_fresh_node(self, write_script):
        loader = ScriptItemLoader(write_script(CLASS_SCRIPT))
        saver = FileItemSaver()

        assert loader.wrap_saver(saver) is not loader.wrap_saver(saver)

    def test_non_callable_hook_ignored(self, write_script):
        loader = ScriptItemLoader(write_script("clipscript_plugin = {'copyItem': 'nope'}"))
        saver = FileItemSaver()

        assert loader.wrap_saver(saver) is saver

    def test_create_item_scriptable(self, write_script):
        source = "value = 1\nclipscript_plugin = {}\n"
        loader = ScriptItemLoader(write_script(source))
        loader.sandbox.context.namespace["value"] = 99

        scriptable = loader.create_item_scriptable()
        scriptable.start()

        assert scriptable.namespace["value"] == 1


class TestCreateItemLoaderScript:
    def test_returns_loader(self, write_script):
        loader = create_item_loader_script(write_script(METADATA_SCRIPT))
        assert isinstance(loader, ScriptItemLoader)

    def test_returns_none_for_unusable_script(self, write_script):
        assert create_item_loader_script(write_script("")) is None
        assert create_item_loader_script(write_script("clipscript_plugin = 3", "n.py")) is None
