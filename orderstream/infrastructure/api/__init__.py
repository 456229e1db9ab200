"""Orders backend REST clients."""

from orderstream.infrastructure.api.base_api_client import BaseAPIClient
from orderstream.infrastructure.api.orders_api_client import PartnerOrdersAPIClient

__all__ = ["BaseAPIClient", "PartnerOrdersAPIClient"]
