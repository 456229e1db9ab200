"""LoggerProtocol definition for structured logging.

Components accept any logger with these call signatures: the
ConsoleAdapter, a plain structlog bound logger, or a MagicMock in tests.

Conventions:
    - Messages are snake_case event names (``sse_connection_opened``)
    - Context is passed as key-value pairs, never interpolated
    - NEVER log bearer tokens

Usage:
    logger.info("sse_connection_opened", url=url)
    scoped = logger.bind(partner_id=partner_id)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(self, message: str, /, **context: Any) -> None:
        """Log an error-level message.

        Args:
            message: Event name.
            **context: Structured context; adapters may expand an
                ``error`` exception into error_type / error_message.
        """
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.
        """
        ...
