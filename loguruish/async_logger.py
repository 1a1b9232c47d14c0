"""Background logging: records are queued and written by worker threads in batches."""

from __future__ import annotations

import queue
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from loguruish.formatter import LogLevel, Record

DEFAULT_BATCH_SIZE = 32
DEFAULT_FLUSH_INTERVAL = 0.1
DEFAULT_QUEUE_SIZE = 10000


class Handler(ABC):
    """Destination for log records.

    A handler that buffers output may define a ``flush()`` method; the
    workers call it on flush and shutdown requests.
    """

    def __init__(self, level: LogLevel = LogLevel.INFO, enabled: bool = True) -> None:
        self.level = level
        self.enabled = enabled

    @abstractmethod
    def handle(self, record: Record) -> None:
        """Write one record."""

    def handle_batch(self, records: Sequence[Record]) -> None:
        """Write several records; by default one at a time."""
        for record in records:
            self.handle(record)


class _Command:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


_FLUSH = _Command("flush")
_SHUTDOWN = _Command("shutdown")


class _Counter:
    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def add(self, delta: int) -> None:
        with self._lock:
            self._value += delta

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class _Worker:
    def __init__(
        self,
        commands: queue.Queue,
        handlers: list[Handler],
        level: LogLevel,
        queued: _Counter,
        batch_size: int,
        flush_interval: float,
    ) -> None:
        self._commands = commands
        self._handlers = handlers
        self._level = level
        self._queued = queued
        self._batch_size = batch_size
        self._flush_interval = flush_interval

    def run(self) -> None:
        batch: list[Record] = []
        last_flush = time.monotonic()
        while True:
            try:
                command = self._commands.get(timeout=self._flush_interval)
            except queue.Empty:
                if batch and time.monotonic() - last_flush >= self._flush_interval:
                    self._process(batch)
                    last_flush = time.monotonic()
                continue
            if command is _SHUTDOWN:
                self._process(batch)
                self._flush_handlers()
                return
            if command is _FLUSH:
                self._process(batch)
                self._flush_handlers()
                last_flush = time.monotonic()
                continue
            batch.append(command)
            self._queued.add(-1)
            if len(batch) >= self._batch_size:
                self._process(batch)
                last_flush = time.monotonic()

    def _process(self, batch: list[Record]) -> None:
        if not batch:
            return
        records = list(batch)
        batch.clear()
        for handler in self._handlers:
            if handler.enabled and self._level >= handler.level:
                try:
                    handler.handle_batch(records)
                except Exception:
                    pass

    def _flush_handlers(self) -> None:
        for handler in self._handlers:
            if not handler.enabled:
                continue
            flush = getattr(handler, "flush", None)
            if callable(flush):
                try:
                    flush()
                except Exception:
                    pass


class AsyncLoggerHandle:
    """Front end of a running background logger.

    Use it as a context manager to shut it down on exit.
    """

    def __init__(self, commands: queue.Queue, workers: list[threading.Thread], queued: _Counter):
        self._commands = commands
        self._workers = workers
        self._queued = queued
        self._running = True
        self._lock = threading.Lock()

    def log(self, record: Record) -> bool:
        """Queue a record; False if the logger is stopped or the queue is full."""
        if not self._running:
            return False
        try:
            self._commands.put_nowait(record)
        except queue.Full:
            return False
        self._queued.add(1)
        return True

    def flush(self) -> bool:
        """Ask the workers to write pending records and flush handlers."""
        if not self._running:
            return False
        try:
            self._commands.put_nowait(_FLUSH)
        except queue.Full:
            return False
        return True

    def shutdown(self) -> None:
        """Stop accepting records, let the workers drain and wait for them."""
        with self._lock:
            if not self._running:
                return
            self._running = False
        for _ in self._workers:
            self._commands.put(_SHUTDOWN)
        for worker in self._workers:
            worker.join()

    def queued_records(self) -> int:
        """Records accepted but not yet picked up by a worker."""
        return self._queued.value

    def __enter__(self) -> AsyncLoggerHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


class AsyncLoggerBuilder:
    """Configures and starts a background logger."""

    def __init__(self) -> None:
        self._queue_size = DEFAULT_QUEUE_SIZE
        self._handlers: list[Handler] = []
        self._level = LogLevel.INFO
        self._workers = 1
        self._batch_size = DEFAULT_BATCH_SIZE
        self._flush_interval = DEFAULT_FLUSH_INTERVAL

    def with_queue_size(self, queue_size: int) -> AsyncLoggerBuilder:
        if queue_size < 1:
            raise ValueError("queue size must be at least 1")
        self._queue_size = queue_size
        return self

    def with_handlers(self, handlers: Iterable[Handler]) -> AsyncLoggerBuilder:
        self._handlers = list(handlers)
        return self

    def with_level(self, level: LogLevel) -> AsyncLoggerBuilder:
        self._level = level
        return self

    def with_workers(self, workers: int) -> AsyncLoggerBuilder:
        if workers < 0:
            raise ValueError("worker count cannot be negative")
        self._workers = workers
        return self

    def with_batch_size(self, batch_size: int) -> AsyncLoggerBuilder:
        self._batch_size = batch_size
        return self

    def with_flush_interval(self, flush_interval: float) -> AsyncLoggerBuilder:
        """Seconds a partial batch may wait before it is written."""
        if flush_interval <= 0:
            raise ValueError("flush interval must be positive")
        self._flush_interval = flush_interval
        return self

    def build(self) -> AsyncLoggerHandle:
        """Start the worker threads and return the handle."""
        commands: queue.Queue = queue.Queue(maxsize=self._queue_size)
        queued = _Counter()
        threads = []
        for index in range(self._workers):
            worker = _Worker(
                commands,
                list(self._handlers),
                self._level,
                queued,
                self._batch_size,
                self._flush_interval,
            )
            thread = threading.Thread(
                target=worker.run, name=f"async-logger-{index}", daemon=True
            )
            thread.start()
            threads.append(thread)
        return AsyncLoggerHandle(commands, threads, queued)