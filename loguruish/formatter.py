"""Log levels, log records and a pattern-based text formatter."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity of a log record, ordered from least to most severe."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    SUCCESS = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    def __str__(self) -> str:
        return self.name

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    @classmethod
    def parse(cls, text: str) -> LogLevel:
        """Parse a level name, case-insensitively; raises ValueError if unknown."""
        key = text.upper()
        key = _LEVEL_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown log level: {text!r}") from None


_LEVEL_ALIASES = {"WARN": "WARNING", "ERR": "ERROR", "CRIT": "CRITICAL"}


@dataclass(frozen=True)
class Record:
    """A single log event."""

    level: LogLevel
    message: str
    module: str = "unknown"
    file: str = "unknown"
    line: int = 0
    metadata: Mapping[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def with_metadata(self, key: str, value: Any) -> Record:
        """Return a copy of this record with one more metadata entry."""
        return replace(self, metadata={**self.metadata, key: str(value)})


_RESET = "\x1b[0m"
_LEVEL_COLORS = {
    LogLevel.ERROR: "\x1b[31m",
    LogLevel.WARNING: "\x1b[33m",
    LogLevel.INFO: "\x1b[32m",
    LogLevel.DEBUG: "\x1b[34m",
    LogLevel.TRACE: "\x1b[36m",
    LogLevel.SUCCESS: "\x1b[32m",
    LogLevel.CRITICAL: "\x1b[31m",
}

FormatFn = Callable[[Record], str]


@dataclass
class TextFormatter:
    """Formats records by filling the placeholders of a pattern.

    Placeholders: ``{timestamp}``, ``{level}``, ``{module}``, ``{location}``
    and ``{message}``. A custom ``format_fn`` replaces the pattern entirely.
    """

    use_colors: bool = True
    include_timestamp: bool = True
    include_level: bool = True
    include_module: bool = True
    include_location: bool = True
    pattern: str = "{timestamp} {level} {module} {location} {message}"
    format_fn: FormatFn | None = None
    clock: Callable[[], datetime] = field(default=datetime.now, repr=False)

    def format(self, record: Record) -> str:
        """Render a record as a single line of text."""
        if self.format_fn is not None:
            return self.format_fn(record)

        output = self.pattern

        timestamp = ""
        if self.include_timestamp:
            now = self.clock()
            timestamp = now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"
        output = output.replace("{timestamp}", timestamp)

        level = ""
        if self.include_level:
            level = str(record.level)
            if self.use_colors:
                level = f"{_LEVEL_COLORS[record.level]}{level}{_RESET}"
        output = output.replace("{level}", level)

        output = output.replace("{module}", record.module if self.include_module else "")

        location = f"{record.file}:{record.line}" if self.include_location else ""
        output = output.replace("{location}", location)

        output = output.replace("{message}", record.message)
        return output.strip()