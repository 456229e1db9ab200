"""Container module - composition root.

Re-exports all factory functions:

    from orderstream.core.container import create_order_source_selector

- infrastructure: app-scoped logger and storage
- realtime: session-scoped stream service, API client and source selector
"""

from orderstream.core.container.infrastructure import get_logger, get_storage
from orderstream.core.container.realtime import (
    create_order_source_selector,
    create_order_stream_service,
    create_orders_api_client,
)

__all__ = [
    "create_order_source_selector",
    "create_order_stream_service",
    "create_orders_api_client",
    "get_logger",
    "get_storage",
]
