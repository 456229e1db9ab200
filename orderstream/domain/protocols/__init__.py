"""Domain protocols (ports).

Infrastructure adapters implement these without inheritance (structural
typing).
"""

from orderstream.domain.protocols.logger_protocol import LoggerProtocol
from orderstream.domain.protocols.order_api_protocol import OrderApiProtocol
from orderstream.domain.protocols.order_source_protocol import (
    OrderSourceProtocol,
    StatusListener,
)
from orderstream.domain.protocols.token_store_protocol import TokenStoreProtocol

__all__ = [
    "LoggerProtocol",
    "OrderApiProtocol",
    "OrderSourceProtocol",
    "StatusListener",
    "TokenStoreProtocol",
]
