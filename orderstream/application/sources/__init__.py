"""Order sources.

- RealTimeOrderSource: initial fetch + SSE order stream
- PollingOrderSource: periodic full fetch
- OrderSourceSelector: strategy choice and SSE → polling failover
"""

from orderstream.application.sources.order_source_selector import (
    ConnectionInfo,
    OrderSourceSelector,
)
from orderstream.application.sources.polling_order_source import PollingOrderSource
from orderstream.application.sources.realtime_order_source import RealTimeOrderSource

__all__ = [
    "ConnectionInfo",
    "OrderSourceSelector",
    "PollingOrderSource",
    "RealTimeOrderSource",
]
