"""Script execution for clipscript plugins.

Each plugin script runs in its own isolated context; its diagnostics reach
the host log through a message bridge.
"""

from clipscript.scripting.bridge import (
    LogEvent,
    MessageBridge,
    MessageCode,
    Severity,
    classify,
)
from clipscript.scripting.resolver import (
    Resolution,
    find_function,
    get_function,
    get_member,
    resolve_property,
)
from clipscript.scripting.sandbox import (
    FACTORY_NAME,
    ItemScriptable,
    SandboxFault,
    SandboxResult,
    ScriptContext,
    ScriptSandbox,
    ScriptSource,
    is_object_like,
)

__all__ = [
    "FACTORY_NAME",
    "ItemScriptable",
    "LogEvent",
    "MessageBridge",
    "MessageCode",
    "Resolution",
    "SandboxFault",
    "SandboxResult",
    "ScriptContext",
    "ScriptSandbox",
    "ScriptSource",
    "Severity",
    "classify",
    "find_function",
    "get_function",
    "get_member",
    "is_object_like",
    "resolve_property",
]
