"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from clipscript.config.schema import ClipScriptConfig
from clipscript.scripting.bridge import LogEvent, MessageBridge


@pytest.fixture
def default_config() -> ClipScriptConfig:
    """Provide a default configuration for tests."""
    return ClipScriptConfig()


@pytest.fixture
def events() -> list[LogEvent]:
    """Collects log events delivered through a bridge."""
    return []


@pytest.fixture
def bridge(events: list[LogEvent]) -> MessageBridge:
    return MessageBridge("test", sink=events.append)


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[..., Path]:
    """Write a script file into a temporary directory."""

    def _write(source: str, name: str = "plugin.py") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
