"""Core enums package.

Usage:
    from orderstream.core.enums import ErrorCode, Environment, RealTimeStrategy
"""

from orderstream.core.enums.environment import Environment
from orderstream.core.enums.error_code import ErrorCode
from orderstream.core.enums.realtime_strategy import RealTimeStrategy

__all__ = ["ErrorCode", "Environment", "RealTimeStrategy"]
