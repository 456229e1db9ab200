"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables
(prefix ``ORDERSTREAM_``) and an optional ``.env`` file.

Architecture:
- Flat Settings structure (no nesting)
- Real-time presets are derived in `orderstream.core.realtime_config`
- Optional overrides stay ``None`` so presets apply unless set explicitly

Usage:
    from orderstream.core.config import get_settings

    settings = get_settings()
    url = f"{settings.api_base_url}{settings.orders_sse_path}"
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderstream.core.constants import (
    REQUEST_TIMEOUT_SECONDS_DEFAULT,
    SSE_HANDSHAKE_TIMEOUT_SECONDS_DEFAULT,
    SSE_HEARTBEAT_INTERVAL_MS_DEFAULT,
    SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT,
    SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT,
    SSE_MAX_RECONNECT_DELAY_MS_DEFAULT,
)
from orderstream.core.enums import Environment, RealTimeStrategy


class Settings(BaseSettings):
    """
    Client settings (flat structure).

    Configuration precedence:
        1. Environment variables (ORDERSTREAM_*)
        2. .env file in the working directory
        3. Default values
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Backend
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Orders backend base URL (e.g., https://backend.example.com/api)",
    )
    orders_path: str = Field(
        default="/partner/orders",
        description="Path of the partner order list endpoint",
    )
    orders_sse_path: str = Field(
        default="/partner/orders/sse",
        description="Path of the partner order SSE endpoint",
    )
    request_timeout_seconds: float = Field(
        default=REQUEST_TIMEOUT_SECONDS_DEFAULT,
        description="Timeout for REST calls to the orders backend",
    )

    # Local key-value storage (token, partner profile)
    storage_path: Path = Field(
        default=Path.home() / ".orderstream" / "storage.json",
        description="JSON file backing the local key-value storage",
    )

    # Real-time overrides (None = environment preset)
    realtime_strategy: RealTimeStrategy | None = Field(
        default=None,
        description="Force 'sse' or 'polling' regardless of environment preset",
    )
    polling_interval_ms: int | None = Field(
        default=None,
        description="Force the polling interval in milliseconds",
    )

    # SSE reconnection
    sse_max_reconnect_attempts: int = Field(
        default=SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT,
        description="Reconnect attempts before giving up on SSE",
    )
    sse_initial_reconnect_delay_ms: int = Field(
        default=SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT,
        description="Delay before the first reconnect attempt",
    )
    sse_max_reconnect_delay_ms: int = Field(
        default=SSE_MAX_RECONNECT_DELAY_MS_DEFAULT,
        description="Upper bound on the reconnect delay",
    )
    sse_heartbeat_interval_ms: int = Field(
        default=SSE_HEARTBEAT_INTERVAL_MS_DEFAULT,
        description="Server heartbeat interval, used for stale stream detection",
    )
    sse_handshake_timeout_seconds: float = Field(
        default=SSE_HANDSHAKE_TIMEOUT_SECONDS_DEFAULT,
        description="Maximum time to wait for the SSE response headers",
    )

    # Feature flags
    enable_polling_fallback: bool = Field(
        default=True,
        description="Switch to polling once SSE gives up reconnecting",
    )
    enable_optimistic_updates: bool = Field(
        default=True,
        description="Apply local order patches before server confirmation",
    )
    sse_rollout_percent: int = Field(
        default=100,
        description="Share of partners (0-100) allowed to use SSE",
    )

    model_config = SettingsConfigDict(
        env_prefix="ORDERSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("sse_rollout_percent")
    @classmethod
    def validate_rollout_percent(cls, v: int) -> int:
        """
        Validate rollout percentage is within 0-100.

        Raises:
            ValueError: If percentage is out of range.
        """
        if not 0 <= v <= 100:
            raise ValueError("sse_rollout_percent must be between 0 and 100")
        return v

    @field_validator(
        "sse_max_reconnect_attempts",
        "sse_initial_reconnect_delay_ms",
        "sse_max_reconnect_delay_ms",
        "sse_heartbeat_interval_ms",
    )
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Reject negative reconnection parameters."""
        if v < 0:
            raise ValueError("reconnection parameters must not be negative")
        return v

    @property
    def orders_sse_url(self) -> str:
        """Full URL of the SSE endpoint."""
        return f"{self.api_base_url}{self.orders_sse_path}"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Cached settings instance (loaded once per process).
    """
    return Settings()
