# loguruish

loguruish is a small logging toolkit that uses only the standard library.
It has five modules:

- `loguruish.context` keeps a per-thread stack of key/value maps and a
  process-wide global context. Snapshots carry context from one thread to
  another.
- `loguruish.errors` reports errors and missing values, wraps an error
  with context, walks an error's cause chain and reports uncaught
  exceptions.
- `loguruish.formatter` provides `LogLevel`, `Record` and a
  pattern-based `TextFormatter` that can add ANSI colours.
- `loguruish.config` provides `LoggerConfig` and `LoggerConfigBuilder`.
  The builder reads TOML and `LOGURU_*` environment variables.
- `loguruish.async_logger` provides `AsyncLoggerBuilder`. It starts a
  queue served by worker threads, which pass batches of records to your
  handlers.

## Installation

```
pip install loguruish
```

The package has no runtime dependencies. The `test` extra installs
pytest:

```
pip install "loguruish[test]"
```

## Context

Context values are plain data: `str`, `int`, `float`, `bool`, `dict`,
`list` and `None`.

```python
from loguruish.context import (
    create_context_scope, set_context_value, get_context_value,
    set_global_context_value, current_context, format_context_value,
)

set_global_context_value("app_name", "example-app")

with create_context_scope():
    set_context_value("user_id", "alice")
    with create_context_scope():
        set_context_value("request_id", "req-123")
        assert get_context_value("user_id") == "alice"
        assert current_context() == {"user_id": "alice", "request_id": "req-123"}
    # leaving the inner scope removes request_id

print(format_context_value(True))   # true
print(format_context_value(None))   # null
```

Each thread has its own stack. `set_context_value` writes to the top map
of the stack. If the stack is empty, it does nothing.
`get_context_value` searches the stack from the top down and returns
`None` when the key is absent. Global values are shared by all threads
and are read with `get_global_context_value`.

To pass context to another thread:

1. Call `create_context_snapshot()` in the current thread. The snapshot
   holds the merged thread context and a copy of the global context.
2. In the new thread, open a scope with `create_context_scope()`.
3. Inside that scope, call `restore_context(snapshot)`.

`clear_context()` empties both this thread's stack and the global
context. `context_depth()` and `has_context()` report on the stack.

## Errors

```python
from loguruish.errors import log_error, log_none, with_context, error_chain

err = log_error(OSError("disk full"), "save failed")   # stderr: [ERROR] save failed: disk full
wrapped = with_context(err, lambda: "saving report")
print(wrapped)                 # disk full (context: saving report)
print(error_chain(wrapped))    # ['disk full (context: saving report)', 'disk full']

log_none(None, "missing value")  # stderr: [ERROR] missing value: None value
```

- `error_chain` follows `__cause__`. It also follows `__context__`,
  unless the context is suppressed.
- `install_panic_hook()` installs hooks on `sys.excepthook` and
  `threading.excepthook`. The hooks print `[PANIC] at <location>: <message>`
  and then call the hooks that were there before. Calling it a second
  time has no effect.
- `source_location()` returns the caller's file, line and column.
- `log_error_with_location(error, msg=None)` prints the error with that
  location as a prefix.

## Formatting

```python
from loguruish.formatter import LogLevel, Record, TextFormatter

record = Record(LogLevel.INFO, "User logged in", module="auth",
                file="auth.py", line=42).with_metadata("ip", "192.0.2.1")
formatter = TextFormatter(use_colors=False, include_timestamp=False)
print(formatter.format(record))   # INFO auth auth.py:42 User logged in
```

**Levels.** The levels, from least to most severe, are `TRACE`,
`DEBUG`, `INFO`, `SUCCESS`, `WARNING`, `ERROR` and `CRITICAL`.
`LogLevel.parse` ignores case and accepts `warn`, `err` and `crit` as
short forms. It raises `ValueError` for unknown names.

**Records.** `Record` is immutable. `with_metadata` returns a new record
and stores the value as a string.

**Patterns.** The formatter pattern supports these placeholders:
`{timestamp}`, `{level}`, `{module}`, `{location}` and `{message}`. Each
`include_*` flag blanks its placeholder. The result is stripped of
surrounding whitespace. A `format_fn` replaces the pattern entirely. A
`clock` callable supplies the timestamp.

## Configuration

```python
from loguruish.config import LoggerConfig, LoggerConfigBuilder

config = (
    LoggerConfigBuilder()
    .from_toml_str('level = "Debug"\nuse_colors = false')
    .with_env_overrides()
    .build()
)

dev = LoggerConfig.development()
```

**Environment variables.** `with_env_overrides(environ=None)` reads from
`os.environ` unless you pass a mapping. It reads these variables:

- `LOGURU_LEVEL`
- `LOGURU_CAPTURE_SOURCE`
- `LOGURU_USE_COLORS`
- `LOGURU_FORMAT`

A boolean variable counts as true only for `1`, `true`, `TRUE` or
`True`. An unrecognised level is ignored.

**TOML.** `from_toml_str` and `from_toml_file` accept the keys `level`,
`capture_source`, `use_colors` and `format`. They raise `ValueError` when
the TOML is malformed or a value has the wrong type. `from_toml_file`
also lets `OSError` through.

**Presets.** The ready-made configurations are `basic_console()`,
`file_logging(path)`, `development()` and `production()`.

## Background logging

Subclass `Handler` and implement `handle`. You can also override
`handle_batch` to take a whole batch at once. If the handler defines a
`flush()` method, it is called on flush and on shutdown.

```python
from loguruish.async_logger import AsyncLoggerBuilder, Handler
from loguruish.formatter import LogLevel, Record

class ListHandler(Handler):
    def __init__(self):
        super().__init__(level=LogLevel.INFO)
        self.records = []

    def handle(self, record):
        self.records.append(record)

handler = ListHandler()
with AsyncLoggerBuilder().with_handlers([handler]).with_workers(2).build() as logger:
    logger.log(Record(LogLevel.INFO, "hello"))
# leaving the block writes pending records and stops the workers
assert len(handler.records) == 1
```

**Handle methods.**

- `log` returns `False` if the logger has been shut down or the queue is
  full.
- `flush` asks the workers to write pending records and to flush the
  handlers.
- `shutdown` stops the workers after they finish their current records.
- `queued_records` counts records that no worker has picked up yet.

**Batching.** Workers write a batch when one of these happens:

- the batch reaches `with_batch_size` records (default 32);
- a partial batch has waited `with_flush_interval` seconds (default
  0.1);
- the logger receives a flush or shutdown request.

**Routing.** A handler receives batches only when it is enabled and its
`level` is at or below the builder's level (set with `with_level`,
default `INFO`).

## What the package does not do

- It has no synchronous logger object and no global logger to
  initialise.
- It ships no ready-made console or file handlers. You write `Handler`
  subclasses for the places records should go.
- Context is not attached to records automatically.
- `LoggerConfig` only holds settings. Nothing in the package builds a
  logger from it, and its `format` string is not used by
  `TextFormatter`.

## Running the tests

```
pytest
```