"""Real-time order delivery factories.

Session-scoped factories: every call builds fresh, explicitly owned
instances. The caller owns the returned object and is responsible for
stopping it.

- create_order_stream_service(): SSE fan-out client
- create_orders_api_client(): partner orders REST client
- create_order_source_selector(): fully wired SSE/polling selector
"""

from functools import partial

from orderstream.application.projections import OrderListProjection
from orderstream.application.sources import (
    OrderSourceSelector,
    PollingOrderSource,
    RealTimeOrderSource,
)
from orderstream.core.config import Settings, get_settings
from orderstream.core.container.infrastructure import get_logger, get_storage
from orderstream.core.realtime_config import FeatureFlags, RealTimeConfig
from orderstream.domain.protocols import TokenStoreProtocol
from orderstream.domain.value_objects import ReconnectPolicy
from orderstream.infrastructure.api import PartnerOrdersAPIClient
from orderstream.infrastructure.sse import OrderStreamService, SSEConnection


def create_order_stream_service(
    token_store: TokenStoreProtocol | None = None,
    settings: Settings | None = None,
) -> OrderStreamService:
    """Build an order stream service for one session.

    Args:
        token_store: Bearer token source (app storage if not provided).
        settings: Settings override (cached settings if not provided).

    Returns:
        New OrderStreamService, not yet connected.
    """
    settings = settings or get_settings()
    sse = RealTimeConfig.from_settings(settings).sse
    logger = get_logger()

    return OrderStreamService(
        token_store=token_store or get_storage(),
        url=settings.orders_sse_url,
        policy=ReconnectPolicy(
            initial_delay_ms=sse.initial_reconnect_delay,
            max_delay_ms=sse.max_reconnect_delay,
            max_attempts=sse.max_reconnect_attempts,
        ),
        connection_factory=partial(
            SSEConnection,
            heartbeat_interval_ms=sse.heartbeat_interval,
            handshake_timeout=settings.sse_handshake_timeout_seconds,
            logger=logger,
        ),
        logger=logger,
    )


def create_orders_api_client(
    token_store: TokenStoreProtocol | None = None,
    settings: Settings | None = None,
) -> PartnerOrdersAPIClient:
    """Build the partner orders REST client.

    Args:
        token_store: Bearer token source (app storage if not provided).
        settings: Settings override (cached settings if not provided).
    """
    settings = settings or get_settings()
    return PartnerOrdersAPIClient(
        base_url=settings.api_base_url,
        token_store=token_store or get_storage(),
        orders_path=settings.orders_path,
        timeout=settings.request_timeout_seconds,
    )


def create_order_source_selector(
    token_store: TokenStoreProtocol | None = None,
    settings: Settings | None = None,
) -> OrderSourceSelector:
    """Build a fully wired order source selector.

    Both sources share one orders API client; each keeps its own
    projection.

    Args:
        token_store: Session storage (app storage if not provided).
        settings: Settings override (cached settings if not provided).

    Returns:
        New OrderSourceSelector, not yet started.
    """
    settings = settings or get_settings()
    token_store = token_store or get_storage()
    config = RealTimeConfig.from_settings(settings)
    logger = get_logger()
    api_client = create_orders_api_client(token_store, settings)

    return OrderSourceSelector(
        sse_source=RealTimeOrderSource(
            api_client=api_client,
            stream_service=create_order_stream_service(token_store, settings),
            projection=OrderListProjection(logger=logger),
            logger=logger,
        ),
        polling_source=PollingOrderSource(
            api_client=api_client,
            interval_ms=config.polling_interval,
            projection=OrderListProjection(logger=logger),
            logger=logger,
        ),
        config=config,
        flags=FeatureFlags.from_settings(settings),
        token_store=token_store,
        logger=logger,
    )
