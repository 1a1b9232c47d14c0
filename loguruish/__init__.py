"""Logging helpers: context stacks, error reporting, text formatting, configuration and background logging."""

__version__ = "0.1.18"
__all__ = ["async_logger", "config", "context", "errors", "formatter"]