"""Logging adapters (structlog)."""

from orderstream.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]
