"""Core shared kernel.

Foundational pieces used by every layer:
- Result types for railway-oriented programming
- Base error class and error codes
- Settings and real-time configuration

The core module has NO dependencies on other package layers, except the
container (composition root) which wires them together.
"""

from orderstream.core.enums import ErrorCode
from orderstream.core.errors import DomainError
from orderstream.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
]
