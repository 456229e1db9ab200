"""Real-time delivery configuration and feature flags.

Presets per environment:
    - default: SSE, 30 s polling interval
    - development: polling every 10 s (easier debugging)
    - production: SSE, 60 s fallback polling interval

Explicit overrides in Settings (``realtime_strategy``,
``polling_interval_ms``) win over the preset.

Usage:
    from orderstream.core.config import get_settings
    from orderstream.core.realtime_config import FeatureFlags, RealTimeConfig

    settings = get_settings()
    config = RealTimeConfig.from_settings(settings)
    flags = FeatureFlags.from_settings(settings)
"""

import zlib
from dataclasses import dataclass, field, replace

from orderstream.core.config import Settings
from orderstream.core.constants import (
    POLLING_INTERVAL_MS_DEFAULT,
    SSE_HEARTBEAT_INTERVAL_MS_DEFAULT,
    SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT,
    SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT,
    SSE_MAX_RECONNECT_DELAY_MS_DEFAULT,
    SSE_ROLLOUT_BUCKETS,
)
from orderstream.core.enums import Environment, RealTimeStrategy


@dataclass(frozen=True, slots=True, kw_only=True)
class SSEConfig:
    """SSE reconnection settings (milliseconds).

    Attributes:
        max_reconnect_attempts: Attempts before giving up.
        initial_reconnect_delay: Delay before the first retry.
        max_reconnect_delay: Upper bound on any retry delay.
        heartbeat_interval: Expected server heartbeat period.
    """

    max_reconnect_attempts: int = SSE_MAX_RECONNECT_ATTEMPTS_DEFAULT
    initial_reconnect_delay: int = SSE_INITIAL_RECONNECT_DELAY_MS_DEFAULT
    max_reconnect_delay: int = SSE_MAX_RECONNECT_DELAY_MS_DEFAULT
    heartbeat_interval: int = SSE_HEARTBEAT_INTERVAL_MS_DEFAULT


@dataclass(frozen=True, slots=True, kw_only=True)
class RealTimeConfig:
    """Strategy and timing for order updates.

    Attributes:
        strategy: SSE stream or periodic polling.
        polling_interval: Polling period in milliseconds.
        sse: Reconnection settings for the SSE path.
    """

    strategy: RealTimeStrategy = RealTimeStrategy.SSE
    polling_interval: int = POLLING_INTERVAL_MS_DEFAULT
    sse: SSEConfig = field(default_factory=SSEConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> "RealTimeConfig":
        """Return the preset for an environment.

        Args:
            environment: Runtime environment.

        Returns:
            RealTimeConfig preset.
        """
        default = cls()
        if environment == Environment.DEVELOPMENT:
            return replace(default, strategy=RealTimeStrategy.POLLING, polling_interval=10000)
        if environment == Environment.PRODUCTION:
            return replace(default, strategy=RealTimeStrategy.SSE, polling_interval=60000)
        return default

    @classmethod
    def from_settings(cls, settings: Settings) -> "RealTimeConfig":
        """Build config from the environment preset plus explicit overrides.

        Args:
            settings: Loaded settings.

        Returns:
            RealTimeConfig for this process.
        """
        preset = cls.for_environment(settings.environment)
        return replace(
            preset,
            strategy=settings.realtime_strategy or preset.strategy,
            polling_interval=settings.polling_interval_ms or preset.polling_interval,
            sse=SSEConfig(
                max_reconnect_attempts=settings.sse_max_reconnect_attempts,
                initial_reconnect_delay=settings.sse_initial_reconnect_delay_ms,
                max_reconnect_delay=settings.sse_max_reconnect_delay_ms,
                heartbeat_interval=settings.sse_heartbeat_interval_ms,
            ),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class FeatureFlags:
    """Feature flags for gradual rollout.

    Attributes:
        sse_rollout_percent: Share of partners (0-100) allowed to use SSE.
        enable_polling_fallback: Fall back to polling when SSE gives up.
        enable_optimistic_updates: Apply local patches before confirmation.
    """

    sse_rollout_percent: int = 100
    enable_polling_fallback: bool = True
    enable_optimistic_updates: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeatureFlags":
        """Read flags from settings."""
        return cls(
            sse_rollout_percent=settings.sse_rollout_percent,
            enable_polling_fallback=settings.enable_polling_fallback,
            enable_optimistic_updates=settings.enable_optimistic_updates,
        )

    def enable_sse_for_partner(self, partner_id: str) -> bool:
        """Check whether a partner is inside the SSE rollout.

        Partners are bucketed by a stable CRC32 of their id, so the same
        partner always gets the same answer for a given percentage.

        Args:
            partner_id: Partner identifier.

        Returns:
            True if the partner may use SSE.
        """
        if self.sse_rollout_percent >= SSE_ROLLOUT_BUCKETS:
            return True
        bucket = zlib.crc32(partner_id.encode("utf-8")) % SSE_ROLLOUT_BUCKETS
        return bucket < self.sse_rollout_percent
