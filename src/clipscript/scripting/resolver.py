"""Uniform member resolution on script handler objects.

A handler may declare each metadata field either as a plain value or as a
zero-argument function; callers never need to know which.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from clipscript.scripting.sandbox import ScriptContext

_MISSING = object()


@dataclass(frozen=True)
class Resolution:
    """Resolved member value; ``ok`` is False when nothing usable was found."""

    value: Any = None
    ok: bool = False


def get_member(obj: Any, name: str) -> Any:
    """Look up a member without calling it.

    Mappings are probed by key, other objects by attribute. Returns a private
    sentinel when the member does not exist; errors raised by the object's
    own lookup hooks propagate.
    """
    if obj is None:
        return _MISSING

    if isinstance(obj, Mapping):
        try:
            return obj[name]
        except KeyError:
            return _MISSING

    try:
        return getattr(obj, name)
    except AttributeError:
        return _MISSING


def get_function(obj: Any, name: str) -> Callable[..., Any] | None:
    """Return the member if it exists and is callable.

    Like :func:`get_member`, errors from the object's lookup hooks propagate.
    """
    member = get_member(obj, name)
    return member if member is not _MISSING and callable(member) else None


def resolve_property(context: ScriptContext, obj: Any, name: str) -> Resolution:
    """Resolve ``name`` on ``obj`` as a value or the result of calling it.

    An exception raised while looking the member up or calling it is logged
    as a warning through the context's bridge and cleared; the member is
    then treated as absent.
    """
    lookup = context.call(get_member, obj, name)
    if context.process_uncaught_exception():
        return Resolution()

    value = lookup.value
    if value is _MISSING:
        return Resolution()

    if callable(value):
        result = context.call(value)
        if context.process_uncaught_exception():
            return Resolution()
        value = result.value

    return Resolution(value=value, ok=True)


def find_function(context: ScriptContext, obj: Any, name: str) -> Callable[..., Any] | None:
    """Run :func:`get_function` inside ``context``.

    A lookup that raises is logged as a warning and the member is treated as
    absent.
    """
    lookup = context.call(get_function, obj, name)
    if context.process_uncaught_exception():
        return None
    return lookup.value
