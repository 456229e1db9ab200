"""Base error class for Railway-Oriented Programming.

DomainError is the base class for every error this package returns.
Errors flow through the system as data (inside Failure), not exceptions.

Usage:
    @dataclass(frozen=True, slots=True, kw_only=True)
    class StreamError(DomainError):
        url: str
"""

from dataclasses import dataclass
from typing import Any

from orderstream.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
