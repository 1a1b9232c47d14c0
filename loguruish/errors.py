"""Helpers for logging errors, attaching context and reporting crashes."""

from __future__ import annotations

import inspect
import sys
import threading
import traceback
from collections.abc import Callable
from types import FrameType, TracebackType
from typing import Any, TypeVar

T = TypeVar("T")


class ContextError(Exception):
    """An error wrapped together with a piece of context."""

    def __init__(self, error: BaseException, context: Any) -> None:
        super().__init__(error, context)
        self.error = error
        self.context = context
        self.__cause__ = error

    def __str__(self) -> str:
        return f"{self.error} (context: {self.context})"


def log_error(error: BaseException | None, msg: str) -> BaseException | None:
    """Write the error to stderr if there is one, and return it unchanged."""
    if error is not None:
        print(f"[ERROR] {msg}: {error}", file=sys.stderr)
    return error


def with_context(
    error: BaseException | None, context: Any | Callable[[], Any]
) -> ContextError | None:
    """Wrap an error with context; a callable context is evaluated lazily."""
    if error is None:
        return None
    value = context() if callable(context) else context
    return ContextError(error, value)


def log_none(value: T | None, msg: str) -> T | None:
    """Write a message to stderr if the value is None, and return it."""
    if value is None:
        print(f"[ERROR] {msg}: None value", file=sys.stderr)
    return value


def _source(error: BaseException) -> BaseException | None:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def error_chain(error: BaseException) -> list[str]:
    """Messages of the error and each error that caused it, outermost first."""
    chain: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(str(current))
        current = _source(current)
    return chain


def _traceback_location(tb: TracebackType | None) -> str:
    frames = traceback.extract_tb(tb) if tb is not None else []
    if not frames:
        return "unknown location"
    last = frames[-1]
    colno = getattr(last, "colno", None)
    if colno is None:
        return f"{last.filename}:{last.lineno}"
    return f"{last.filename}:{last.lineno}:{colno + 1}"


def _report_panic(exc: BaseException | None, tb: TracebackType | None) -> None:
    payload = str(exc) if exc is not None else "unknown payload"
    print(f"[PANIC] at {_traceback_location(tb)}: {payload}", file=sys.stderr)


_hook_lock = threading.Lock()
_hook_installed = False


def install_panic_hook() -> None:
    """Report uncaught exceptions with their location, then defer to the previous hooks.

    Installing more than once has no further effect.
    """
    global _hook_installed
    with _hook_lock:
        if _hook_installed:
            return
        _hook_installed = True

        previous = sys.excepthook
        previous_thread = threading.excepthook

        def hook(exc_type, exc, tb):
            _report_panic(exc, tb)
            previous(exc_type, exc, tb)

        def thread_hook(args):
            _report_panic(args.exc_value, args.exc_traceback)
            previous_thread(args)

        sys.excepthook = hook
        threading.excepthook = thread_hook


def _frame_location(frame: FrameType | None) -> tuple[str, int, int]:
    if frame is None:
        return ("unknown", 0, 0)
    info = inspect.getframeinfo(frame, context=0)
    positions = getattr(info, "positions", None)
    column = 0
    if positions is not None and positions.col_offset is not None:
        column = positions.col_offset + 1
    return (info.filename, info.lineno, column)


def source_location() -> tuple[str, int, int]:
    """File, line and 1-based column of the caller."""
    frame = inspect.currentframe()
    try:
        return _frame_location(frame.f_back if frame is not None else None)
    finally:
        del frame


def log_error_with_location(error: Any, msg: str | None = None) -> None:
    """Write an error to stderr, prefixed with the caller's location."""
    frame = inspect.currentframe()
    try:
        file, line, col = _frame_location(frame.f_back if frame is not None else None)
    finally:
        del frame
    if msg is None:
        print(f"[ERROR] at {file}:{line}:{col}: {error}", file=sys.stderr)
    else:
        print(f"[ERROR] at {file}:{line}:{col}: {msg}: {error}", file=sys.stderr)