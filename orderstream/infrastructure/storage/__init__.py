"""Local key-value storage adapters."""

from orderstream.infrastructure.storage.json_file_storage import JsonFileStorage

__all__ = ["JsonFileStorage"]
