"""Domain layer - pure order logic.

Structure:
- entities/: Order and OrderItem
- enums/: Order status, payment enums, connection state
- events/: OrderEvent (the unit of real-time information)
- errors/: Stream and orders API errors
- protocols/: Ports implemented by infrastructure (token store, API, logger)
- value_objects/: ReconnectPolicy

The domain layer has NO dependencies on httpx, structlog or pydantic.
"""
