"""Isolated execution contexts for plugin scripts.

A plugin script is Python source executed into a fresh module namespace that
is never registered in ``sys.modules``. Exceptions escaping script code are
recorded on the context as its uncaught exception and stay there until the
host processes (logs) and clears them, so every entry point follows the same
capture-and-clear discipline.
"""

from __future__ import annotations

import builtins
import logging
import threading
import traceback
import types
from collections.abc import Callable
from dataclasses import dataclass
from itertools import count
from pathlib import Path
from typing import Any

from clipscript.scripting.bridge import MessageBridge, MessageCode
from clipscript.scripting.resolver import Resolution, find_function, resolve_property

logger = logging.getLogger(__name__)

# Top-level symbol a script defines to produce its handler object
FACTORY_NAME = "clipscript_plugin"

_PRIMITIVES = (bool, int, float, complex, str, bytes, bytearray)

_context_ids = count(1)


def is_object_like(value: Any) -> bool:
    """Return True for values that can carry named members."""
    return value is not None and not isinstance(value, _PRIMITIVES)


@dataclass(frozen=True)
class ScriptSource:
    """Script text together with the file it was read from."""

    text: str
    path: Path

    @classmethod
    def read(cls, path: str | Path, encoding: str = "utf-8") -> ScriptSource:
        """Read a script file completely.

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        return cls(text=path.read_text(encoding=encoding), path=path)


@dataclass(frozen=True)
class SandboxFault:
    """An exception that escaped script code."""

    exception: BaseException

    @property
    def description(self) -> str:
        lines = traceback.format_exception_only(type(self.exception), self.exception)
        return "".join(lines).strip()


@dataclass(frozen=True)
class SandboxResult:
    """Outcome of one call into a script context."""

    value: Any = None
    fault: SandboxFault | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None


class ScriptContext:
    """One isolated namespace in which script code runs.

    Calls into a context are serialised; contexts never share state with
    each other.
    """

    def __init__(self, bridge: MessageBridge, name: str | None = None) -> None:
        self.bridge = bridge
        self.name = name or f"clipscript_script_{next(_context_ids)}"
        self._module = types.ModuleType(self.name)
        self._module.__dict__.update(
            {
                "print": self._print,
                "send_message": bridge.send_message,
                "MessageCode": MessageCode,
            }
        )
        self._uncaught: SandboxFault | None = None
        self._lock = threading.RLock()

    @property
    def namespace(self) -> dict[str, Any]:
        """Global namespace of the script."""
        return self._module.__dict__

    def evaluate(self, text: str, origin: str = "<script>") -> SandboxResult:
        """Compile and execute source text in this context."""
        with self._lock:
            self._module.__file__ = origin
            try:
                code = compile(text, origin, "exec")
                exec(code, self._module.__dict__)
            except (Exception, SystemExit) as e:
                return self._record(e)
            return SandboxResult()

    def call(self, fn: Callable[..., Any], *args: Any) -> SandboxResult:
        """Call script code, recording any exception it raises."""
        with self._lock:
            try:
                return SandboxResult(value=fn(*args))
            except (Exception, SystemExit) as e:
                return self._record(e)

    def has_uncaught_exception(self) -> bool:
        return self._uncaught is not None

    @property
    def uncaught_exception(self) -> SandboxFault | None:
        return self._uncaught

    def clear_exceptions(self) -> None:
        self._uncaught = None

    def process_uncaught_exception(self) -> bool:
        """Log and clear a pending uncaught exception.

        Returns:
            True if there was an exception to process
        """
        fault = self._uncaught
        if fault is None:
            return False

        self.bridge.warning(fault.description)
        self.clear_exceptions()
        return True

    def _record(self, exc: BaseException) -> SandboxResult:
        fault = SandboxFault(exc)
        self._uncaught = fault
        logger.debug("Uncaught exception in %s", self.name, exc_info=exc)
        return SandboxResult(fault=fault)

    def _print(
        self,
        *args: Any,
        sep: str | None = " ",
        end: str | None = None,
        file: Any = None,
        flush: bool = False,
    ) -> None:
        if file is not None:
            builtins.print(*args, sep=sep, end=end, file=file, flush=flush)
            return
        self.bridge.send_message((sep or "").join(str(arg) for arg in args), MessageCode.PRINT)


class ItemScriptable:
    """Per-item scripting instance.

    Evaluates the plugin's source again in a context of its own, so nothing
    done here is visible to the plugin-level handler object and vice versa.
    """

    def __init__(self, source: ScriptSource, bridge: MessageBridge) -> None:
        self.source = source
        self.context = ScriptContext(bridge)
        self.started = False

    def start(self) -> bool:
        """Evaluate the script; returns False if it raised."""
        self.started = True
        result = self.eval(self.source.text, str(self.source.path))
        return result.ok

    def eval(self, text: str, origin: str = "<eval>") -> SandboxResult:
        result = self.context.evaluate(text, origin)
        self.context.process_uncaught_exception()
        return result

    def call(self, name: str, *args: Any) -> SandboxResult:
        """Call a top-level function defined by the script."""
        fn = self.context.namespace.get(name)
        if not callable(fn):
            return SandboxResult(fault=SandboxFault(NameError(f"name '{name}' is not defined")))

        result = self.context.call(fn, *args)
        self.context.process_uncaught_exception()
        return result

    @property
    def namespace(self) -> dict[str, Any]:
        return self.context.namespace


class ScriptSandbox:
    """Plugin-level execution context and the handler object it produced."""

    def __init__(
        self,
        identity: str,
        bridge: MessageBridge | None = None,
        factory_name: str = FACTORY_NAME,
    ) -> None:
        self.identity = identity
        self.bridge = bridge or MessageBridge(identity)
        self.factory_name = factory_name
        self.context = ScriptContext(self.bridge, name=f"clipscript_{identity}")
        self.source: ScriptSource | None = None
        self._handler: Any = None

    @property
    def handler(self) -> Any:
        """Handler object produced by the script, or None."""
        return self._handler

    def is_loaded(self) -> bool:
        return is_object_like(self._handler)

    def load(self, text: str, origin_path: str | Path) -> bool:
        """Evaluate the script and obtain its handler object.

        Returns:
            True if the script produced a usable handler object
        """
        if self.source is not None:
            raise RuntimeError(f"Sandbox for '{self.identity}' is already loaded")

        self.source = ScriptSource(text=text, path=Path(origin_path))
        if not text:
            self.bridge.warning(f"Script \"{origin_path}\" is empty")
            return False

        self.context.evaluate(text, str(origin_path))
        if self.context.process_uncaught_exception():
            return False

        handler = self.context.namespace.get(self.factory_name)
        if handler is None:
            self.bridge.warning(f"Script does not define \"{self.factory_name}\"")
            return False

        if callable(handler):
            result = self.context.call(handler)
            if self.context.process_uncaught_exception():
                return False
            handler = result.value

        if not is_object_like(handler):
            self.bridge.warning(
                f"\"{self.factory_name}\" produced {type(handler).__name__}, expected an object"
            )
            return False

        self._handler = handler
        return True

    def resolve(self, name: str) -> Resolution:
        """Resolve a handler member as a value or a zero-argument call."""
        return resolve_property(self.context, self._handler, name)

    def get_function(self, name: str) -> Callable[..., Any] | None:
        """Return a callable handler member, or None."""
        return find_function(self.context, self._handler, name)

    def call(self, fn: Callable[..., Any], *args: Any) -> SandboxResult:
        """Call script code and log any exception it raises."""
        result = self.context.call(fn, *args)
        self.context.process_uncaught_exception()
        return result

    def create_item_scriptable(self) -> ItemScriptable:
        source = self.source or ScriptSource(text="", path=Path(self.identity))
        return ItemScriptable(source, self.bridge)
