"""JSON file key-value storage.

Persisted session storage shared with the host app: the bearer token
under ``token`` and the partner profile under ``partner``.

Storage Format:
    One JSON object; every value is itself a JSON-encoded string, so
    tokens written as raw strings by other writers are still readable:

    {
        "token": "\\"eyJhbGciOi...\\"",
        "partner": "{\\"id\\": \\"p-42\\", \\"name\\": \\"Sparkle Laundry\\"}"
    }

Implements TokenStoreProtocol (structural typing). File I/O runs in a
worker thread (``asyncio.to_thread``) so the event loop never blocks.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog

from orderstream.core.constants import STORAGE_PARTNER_KEY, STORAGE_TOKEN_KEY
from orderstream.domain.protocols import LoggerProtocol


class JsonFileStorage:
    """Async key-value storage backed by a single JSON file.

    Example:
        >>> storage = JsonFileStorage(Path("~/.orderstream/storage.json").expanduser())
        >>> await storage.set_item("token", "abc")
        >>> await storage.get_token()
        'abc'
    """

    def __init__(self, path: Path, logger: LoggerProtocol | None = None) -> None:
        """Initialize storage.

        Args:
            path: JSON file location (created on first write).
            logger: Optional logger (module structlog logger if not provided).
        """
        self._path = path
        self._logger = logger or structlog.get_logger(__name__)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Backing file location."""
        return self._path

    async def get_item(self, key: str) -> Any:
        """Read a value.

        Returns:
            The JSON-decoded value, the raw string when it is not valid
            JSON, or None when the key is absent or empty.
        """
        raw = (await asyncio.to_thread(self._read)).get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return raw

    async def set_item(self, key: str, value: Any) -> None:
        """Store a value (JSON-encoded)."""
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = json.dumps(value)
            await asyncio.to_thread(self._write, data)

    async def remove_item(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if data.pop(key, None) is not None:
                await asyncio.to_thread(self._write, data)

    async def clear(self) -> None:
        """Delete every key."""
        async with self._lock:
            await asyncio.to_thread(self._write, {})

    async def get_token(self) -> str | None:
        """Bearer token of the logged-in partner."""
        token = await self.get_item(STORAGE_TOKEN_KEY)
        return str(token) if token else None

    async def get_partner_id(self) -> str | None:
        """Id of the logged-in partner (``partner.id``)."""
        partner = await self.get_item(STORAGE_PARTNER_KEY)
        if isinstance(partner, dict) and partner.get("id"):
            return str(partner["id"])
        return None

    def _read(self) -> dict[str, Any]:
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self._logger.warning(
                "storage_file_corrupt",
                path=str(self._path),
                error=str(e),
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self._path)
