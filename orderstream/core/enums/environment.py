"""Runtime environment types.

Selects the real-time preset (see RealTimeConfig) and the log renderer:
- DEVELOPMENT: polling preset, human-readable console logs
- TESTING / CI: JSON logs
- PRODUCTION: SSE preset
"""

from enum import Enum


class Environment(str, Enum):
    """Runtime environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
