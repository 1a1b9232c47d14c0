"""Thread-local and global context data that travels with log records.

Context values are plain Python data: ``str``, ``int``, ``float``, ``bool``,
``dict`` (string keys), ``list`` and ``None``.
"""

from __future__ import annotations

import copy
import json
import math
import threading
from dataclasses import dataclass, field
from typing import Any

ContextMap = dict[str, Any]

_local = threading.local()
_global_context: ContextMap = {}
_global_lock = threading.RLock()


def _stack() -> list[ContextMap]:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = []
        _local.stack = stack
    return stack


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _debug(value: Any) -> str:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return f"Bool({'true' if value else 'false'})"
    if isinstance(value, int):
        return f"Integer({value})"
    if isinstance(value, float):
        text = _format_float(value)
        if value.is_integer():
            text += ".0"
        return f"Float({text})"
    if isinstance(value, str):
        return f"String({_quote(value)})"
    if isinstance(value, dict):
        return f"Map({_debug_map(value)})"
    if isinstance(value, (list, tuple)):
        return f"Array({_debug_list(value)})"
    raise TypeError(f"unsupported context value type: {type(value).__name__}")


def _debug_map(value: dict) -> str:
    return "{" + ", ".join(f"{_quote(str(k))}: {_debug(v)}" for k, v in value.items()) + "}"


def _debug_list(value: list | tuple) -> str:
    return "[" + ", ".join(_debug(item) for item in value) + "]"


def format_context_value(value: Any) -> str:
    """Render a context value the way it appears in log output."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return _debug_map(value)
    if isinstance(value, (list, tuple)):
        return _debug_list(value)
    raise TypeError(f"unsupported context value type: {type(value).__name__}")


def push_context(ctx: ContextMap) -> None:
    """Push a context map onto this thread's stack."""
    _stack().append(ctx)


def pop_context() -> ContextMap | None:
    """Pop the top context map, or return None if the stack is empty."""
    stack = _stack()
    return stack.pop() if stack else None


def current_context() -> ContextMap:
    """Merge the stack bottom to top; upper maps override lower ones."""
    merged: ContextMap = {}
    for ctx in _stack():
        merged.update(ctx)
    return merged


def set_context_value(key: str, value: Any) -> None:
    """Set a key in the top context map; does nothing if the stack is empty."""
    stack = _stack()
    if stack:
        stack[-1][key] = value


def get_context_value(key: str) -> Any:
    """Look a key up from the top of the stack down; None if absent."""
    for ctx in reversed(_stack()):
        if key in ctx:
            return ctx[key]
    return None


def has_context() -> bool:
    """Whether this thread has any context map pushed."""
    return bool(_stack())


def set_global_context_value(key: str, value: Any) -> None:
    """Set a value visible to every thread."""
    with _global_lock:
        _global_context[key] = value


def get_global_context_value(key: str) -> Any:
    """Get a global context value, or None if absent."""
    with _global_lock:
        return _global_context.get(key)


@dataclass(frozen=True)
class ContextSnapshot:
    """Captured thread and global context, for handing to another thread."""

    thread_context: ContextMap = field(default_factory=dict)
    global_context: ContextMap = field(default_factory=dict)

    def restore(self) -> None:
        """Push the captured thread context and merge the global one back."""
        push_context(copy.deepcopy(self.thread_context))
        with _global_lock:
            _global_context.update(copy.deepcopy(self.global_context))


def create_context_snapshot() -> ContextSnapshot:
    """Capture the current merged thread context and the global context."""
    with _global_lock:
        global_copy = copy.deepcopy(_global_context)
    return ContextSnapshot(copy.deepcopy(current_context()), global_copy)


def restore_context(snapshot: ContextSnapshot) -> None:
    """Restore context from a snapshot."""
    snapshot.restore()


def clear_context() -> None:
    """Clear this thread's stack and the global context."""
    _stack().clear()
    with _global_lock:
        _global_context.clear()


def context_depth() -> int:
    """Number of maps on this thread's stack."""
    return len(_stack())


class ContextScope:
    """Context manager that pushes an empty map on entry and pops it on exit."""

    def __enter__(self) -> ContextScope:
        push_context({})
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        pop_context()


def create_context_scope() -> ContextScope:
    """Create a new context scope."""
    return ContextScope()