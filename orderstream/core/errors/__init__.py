"""Core errors package.

Usage:
    from orderstream.core.errors import DomainError
"""

from orderstream.core.errors.domain_error import DomainError

__all__ = ["DomainError"]
