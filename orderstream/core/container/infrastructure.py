"""Infrastructure dependency factories.

Application-scoped singletons for stateless infrastructure:
- Logging (structlog console adapter)
- Local key-value storage (JSON file)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from orderstream.core.config import get_settings
from orderstream.core.enums import Environment

if TYPE_CHECKING:
    from orderstream.domain.protocols.logger_protocol import LoggerProtocol
    from orderstream.infrastructure.storage.json_file_storage import JsonFileStorage


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from orderstream.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    use_json = settings.environment is not Environment.DEVELOPMENT
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)


@lru_cache()
def get_storage() -> "JsonFileStorage":
    """Get local key-value storage singleton (app-scoped).

    Returns:
        JsonFileStorage over ``settings.storage_path``. Implements
        TokenStoreProtocol.
    """
    from orderstream.infrastructure.storage.json_file_storage import JsonFileStorage

    return JsonFileStorage(get_settings().storage_path, logger=get_logger())
