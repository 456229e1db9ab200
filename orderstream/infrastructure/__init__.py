"""Infrastructure layer - adapters for HTTP, SSE, storage and logging.

Structure:
- api/: Orders REST client (httpx)
- sse/: SSE streaming client
- mappers/: Backend JSON → domain entities
- storage/: JSON file key-value storage
- logging/: structlog configuration adapter
"""
