"""orderstream - real-time order updates for laundry-service partner apps.

Layers:
- core/: Result types, errors, configuration, composition root
- domain/: Order entities, order events, enums, protocols, value objects
- infrastructure/: SSE streaming client, REST client, storage, logging
- application/: Order sources (SSE, polling), source selection, projection
"""
