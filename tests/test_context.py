from concurrent.futures import ThreadPoolExecutor

import pytest

from loguruish.context import (
    ContextScope,
    clear_context,
    context_depth,
    create_context_scope,
    create_context_snapshot,
    current_context,
    format_context_value,
    get_context_value,
    get_global_context_value,
    has_context,
    pop_context,
    push_context,
    restore_context,
    set_context_value,
    set_global_context_value,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_context()
    yield
    clear_context()


def test_push_and_pop():
    push_context({"a": 1})
    assert context_depth() == 1
    assert has_context()
    assert pop_context() == {"a": 1}
    assert context_depth() == 0
    assert pop_context() is None


def test_current_context_merges_with_top_winning():
    push_context({"a": 1, "b": 2})
    push_context({"b": 3})
    assert current_context() == {"a": 1, "b": 3}


def test_get_context_value_searches_from_top():
    push_context({"k": "low", "only_low": 7})
    push_context({"k": "high"})
    assert get_context_value("k") == "high"
    assert get_context_value("only_low") == 7
    assert get_context_value("missing") is None


def test_set_context_value_without_stack_is_ignored():
    assert not has_context()
    set_context_value("x", 1)
    assert current_context() == {}


def test_scope_pushes_and_pops():
    with create_context_scope() as scope:
        assert isinstance(scope, ContextScope)
        set_context_value("user_id", "alice")
        with create_context_scope():
            set_context_value("request_id", "req-123")
            assert context_depth() == 2
            assert current_context() == {"user_id": "alice", "request_id": "req-123"}
        assert get_context_value("request_id") is None
        assert get_context_value("user_id") == "alice"
    assert context_depth() == 0


def test_scope_pops_on_exception():
    with pytest.raises(KeyError):
        with create_context_scope():
            set_context_value("a", 1)
            raise KeyError("x")
    assert context_depth() == 0


def test_global_context_set_get_and_clear():
    set_global_context_value("app_name", "example-app")
    assert get_global_context_value("app_name") == "example-app"
    clear_context()
    assert get_global_context_value("app_name") is None


def _read_global_app():
    return get_global_context_value("app"), has_context()


def test_global_context_visible_from_other_thread():
    set_global_context_value("app", "demo")
    push_context({"local": 1})
    with ThreadPoolExecutor(max_workers=1) as pool:
        app, thread_has_context = pool.submit(_read_global_app).result()
        pool.submit(set_global_context_value, "other", 2).result()
    assert app == "demo"
    assert thread_has_context is False
    assert get_global_context_value("other") == 2


def _restore_in_thread(snapshot):
    with create_context_scope():
        restore_context(snapshot)
        return get_context_value("trace_id"), context_depth()


def test_snapshot_propagates_to_thread():
    with create_context_scope():
        set_context_value("trace_id", "abc123")
        snapshot = create_context_snapshot()
        assert snapshot.thread_context == {"trace_id": "abc123"}
        with ThreadPoolExecutor(max_workers=1) as pool:
            trace_id, depth = pool.submit(_restore_in_thread, snapshot).result()
    assert trace_id == "abc123"
    assert depth == 2


def test_snapshot_is_isolated_from_later_changes():
    with create_context_scope():
        set_context_value("roles", ["admin"])
        snapshot = create_context_snapshot()
        get_context_value("roles").append("user")
    assert snapshot.thread_context == {"roles": ["admin"]}


def test_snapshot_restore_merges_global():
    set_global_context_value("g", 1)
    snapshot = create_context_snapshot()
    clear_context()
    snapshot.restore()
    assert get_global_context_value("g") == 1
    assert context_depth() == 1


def test_format_scalars():
    assert format_context_value(None) == "null"
    assert format_context_value(True) == "true"
    assert format_context_value("alice") == "alice"
    assert format_context_value(30) == str(30)
    assert format_context_value(1.0) == "1"
    assert format_context_value(2.5) == str(2.5)


def test_format_array_and_map():
    assert format_context_value(["admin", "user"]) == '[String("admin"), String("user")]'
    rendered = format_context_value({"name": "alice"})
    assert rendered.startswith("{") and rendered.endswith("}")
    assert '"name"' in rendered and "alice" in rendered


def test_format_rejects_unknown_type():
    with pytest.raises(TypeError):
        format_context_value(object())