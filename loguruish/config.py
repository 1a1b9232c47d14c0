"""Logger configuration with a fluent builder, environment and TOML overrides."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from loguruish.formatter import LogLevel

_TRUE_WORDS = frozenset({"1", "true", "TRUE", "True"})


@dataclass
class LoggerConfig:
    """Settings for a logger."""

    level: LogLevel = LogLevel.INFO
    handlers: list[Any] = field(default_factory=list)
    capture_source: bool = True
    use_colors: bool = True
    format: str = "{time} {level} {message}"

    @classmethod
    def basic_console(cls) -> LoggerConfig:
        """Coloured console output at INFO."""
        return LoggerConfigBuilder().level(LogLevel.INFO).use_colors(True).build()

    @classmethod
    def file_logging(cls, path: str | os.PathLike[str]) -> LoggerConfig:
        """Plain output at INFO, suited to a log file."""
        return LoggerConfigBuilder().level(LogLevel.INFO).use_colors(False).build()

    @classmethod
    def development(cls) -> LoggerConfig:
        """Detailed DEBUG output with source locations."""
        return (
            LoggerConfigBuilder()
            .level(LogLevel.DEBUG)
            .use_colors(True)
            .capture_source(True)
            .format("{time} {level} {file}:{line} {message}")
            .build()
        )

    @classmethod
    def production(cls) -> LoggerConfig:
        """Minimal INFO output without colours or source capture."""
        return (
            LoggerConfigBuilder()
            .level(LogLevel.INFO)
            .use_colors(False)
            .capture_source(False)
            .format("{time} {level} {message}")
            .build()
        )


def _parse_level(text: str) -> LogLevel | None:
    try:
        return LogLevel.parse(text)
    except ValueError:
        return None


def _expect(table: Mapping[str, Any], key: str, kind: type) -> Any:
    value = table.get(key)
    if value is not None and not isinstance(value, kind):
        raise ValueError(
            f"invalid type for {key!r}: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


class LoggerConfigBuilder:
    """Builds a LoggerConfig step by step; every setter returns the builder."""

    def __init__(self) -> None:
        self._config = LoggerConfig()

    def level(self, level: LogLevel) -> LoggerConfigBuilder:
        self._config.level = level
        return self

    def add_handler(self, handler: Any) -> LoggerConfigBuilder:
        self._config.handlers.append(handler)
        return self

    def capture_source(self, capture: bool) -> LoggerConfigBuilder:
        self._config.capture_source = capture
        return self

    def use_colors(self, use_colors: bool) -> LoggerConfigBuilder:
        self._config.use_colors = use_colors
        return self

    def format(self, format: str) -> LoggerConfigBuilder:
        self._config.format = format
        return self

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> LoggerConfigBuilder:
        """Apply LOGURU_LEVEL, LOGURU_CAPTURE_SOURCE, LOGURU_USE_COLORS and LOGURU_FORMAT.

        An unrecognised level is ignored; a boolean is true only for
        "1", "true", "TRUE" or "True".
        """
        env = os.environ if environ is None else environ
        if (level := env.get("LOGURU_LEVEL")) is not None:
            parsed = _parse_level(level)
            if parsed is not None:
                self._config.level = parsed
        if (capture := env.get("LOGURU_CAPTURE_SOURCE")) is not None:
            self._config.capture_source = capture in _TRUE_WORDS
        if (colors := env.get("LOGURU_USE_COLORS")) is not None:
            self._config.use_colors = colors in _TRUE_WORDS
        if (fmt := env.get("LOGURU_FORMAT")) is not None:
            self._config.format = fmt
        return self

    def from_toml_str(self, text: str) -> LoggerConfigBuilder:
        """Apply the keys level, capture_source, use_colors and format from TOML.

        Raises ValueError on malformed TOML or a value of the wrong type.
        An unrecognised level name is ignored.
        """
        table = tomllib.loads(text)
        level = _expect(table, "level", str)
        capture = _expect(table, "capture_source", bool)
        colors = _expect(table, "use_colors", bool)
        fmt = _expect(table, "format", str)
        if level is not None:
            parsed = _parse_level(level)
            if parsed is not None:
                self._config.level = parsed
        if capture is not None:
            self._config.capture_source = capture
        if colors is not None:
            self._config.use_colors = colors
        if fmt is not None:
            self._config.format = fmt
        return self

    def from_toml_file(self, path: str | os.PathLike[str]) -> LoggerConfigBuilder:
        """Read a TOML file and apply it; OSError and ValueError propagate."""
        return self.from_toml_str(Path(path).read_text(encoding="utf-8"))

    def build(self) -> LoggerConfig:
        """Return the finished configuration."""
        return replace(self._config, handlers=list(self._config.handlers))