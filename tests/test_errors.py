import sys
import threading

import pytest

from loguruish.errors import (
    ContextError,
    error_chain,
    install_panic_hook,
    log_error,
    log_error_with_location,
    log_none,
    source_location,
    with_context,
)


def test_log_error_writes_and_returns(capsys):
    err = OSError("fail")
    assert log_error(err, "API call failed") is err
    assert capsys.readouterr().err == "[ERROR] API call failed: fail\n"


def test_log_error_without_error_is_silent(capsys):
    assert log_error(None, "nothing") is None
    assert capsys.readouterr().err == ""


def test_log_none(capsys):
    assert log_none(None, "Missing value") is None
    assert capsys.readouterr().err == "[ERROR] Missing value: None value\n"
    assert log_none(5, "present") == 5
    assert capsys.readouterr().err == ""


def test_with_context_wraps_and_formats():
    inner = ValueError("boom")
    wrapped = with_context(inner, "loading config")
    assert isinstance(wrapped, ContextError)
    assert wrapped.error is inner
    assert wrapped.context == "loading config"
    assert str(wrapped) == "boom (context: loading config)"
    assert wrapped.__cause__ is inner


def test_with_context_is_lazy():
    calls = []

    def make():
        calls.append(1)
        return "ctx"

    assert with_context(None, make) is None
    assert calls == []
    assert with_context(KeyError("k"), make).context == "ctx"
    assert calls == [1]


def test_context_error_can_be_raised():
    inner = RuntimeError("inner")
    err = ContextError(inner, "outer")
    assert str(err) == "inner (context: outer)"
    assert err.error is inner
    assert err.context == "outer"
    with pytest.raises(ContextError, match=r"inner \(context: outer\)"):
        raise err


def test_error_chain_follows_causes():
    try:
        try:
            raise ValueError("inner")
        except ValueError as exc:
            raise RuntimeError("outer") from exc
    except RuntimeError as exc:
        assert error_chain(exc) == ["outer", "inner"]


def test_error_chain_of_context_error():
    wrapped = with_context(ValueError("boom"), "ctx")
    assert error_chain(wrapped) == [str(wrapped), "boom"]


def test_error_chain_single():
    assert error_chain(KeyError("solo")) == [str(KeyError("solo"))]


def test_source_location_points_at_caller():
    first = source_location()
    second = source_location()
    assert first[0].endswith("test_errors.py")
    assert second[1] == first[1] + 1
    assert first[2] >= 1


def test_log_error_with_location(capsys):
    log_error_with_location("boom", "ctx")
    err = capsys.readouterr().err
    assert err.startswith("[ERROR] at ")
    assert "test_errors.py:" in err
    assert err.endswith(": ctx: boom\n")
    log_error_with_location("bare")
    assert capsys.readouterr().err.endswith(": bare\n")


def test_install_panic_hook_reports_then_delegates(monkeypatch, capsys):
    seen = []
    monkeypatch.setattr(sys, "excepthook", lambda exc_type, exc, tb: seen.append(exc))
    monkeypatch.setattr(threading, "excepthook", lambda args: seen.append(args.exc_value))
    install_panic_hook()
    hook = sys.excepthook
    install_panic_hook()
    assert sys.excepthook is hook

    try:
        raise RuntimeError("kaboom")
    except RuntimeError as exc:
        sys.excepthook(type(exc), exc, exc.__traceback__)
    err = capsys.readouterr().err
    assert err.startswith("[PANIC] at ")
    assert "test_errors.py" in err
    assert err.rstrip().endswith(": kaboom")

    def raiser():
        raise ValueError("thread boom")

    worker = threading.Thread(target=raiser)
    worker.start()
    worker.join()
    assert capsys.readouterr().err.rstrip().endswith(": thread boom")
    assert [str(e) for e in seen] == ["kaboom", "thread boom"]