"""Console logging adapter.

Configures structlog once per process and exposes the LoggerProtocol
surface over it.
- Development: human-readable console renderer with colors
- Testing/CI/production: JSON lines for machine parsing

Module loggers obtained with ``structlog.get_logger(__name__)`` share the
configuration applied here, so components that were not handed an adapter
still log through the same pipeline.

Does NOT inherit from LoggerProtocol (structural subtyping).
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


class ConsoleAdapter:
    """Structured console logger.

    Args:
        use_json: JSON output when True, colored key-value output when False.
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        stream: Output stream (stdout if not provided).
    """

    def __init__(
        self,
        *,
        use_json: bool = False,
        level: str = "INFO",
        stream: TextIO | None = None,
    ) -> None:
        """Configure structlog and bind the adapter logger."""
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ]

        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=stream is None))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
            cache_logger_on_first_use=False,
        )

        self._logger = structlog.get_logger("orderstream")

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info message."""
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, **context)

    def error(self, message: str, /, **context: Any) -> None:
        """Log an error message.

        An exception passed as ``error`` is expanded into error_type and
        error_message; any other ``error`` value is logged as-is.

        Args:
            message: Event name.
            **context: Structured key-value context.
        """
        error = context.get("error")
        if isinstance(error, BaseException):
            del context["error"]
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
        self._logger.error(message, **context)

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return new adapter with bound context.

        Args:
            **context: Context to bind to all subsequent logs.

        Returns:
            ConsoleAdapter: New adapter sharing the structlog configuration.
        """
        bound_adapter = ConsoleAdapter.__new__(ConsoleAdapter)
        bound_adapter._logger = self._logger.bind(**context)
        return bound_adapter
