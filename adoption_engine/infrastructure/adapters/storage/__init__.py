"""Device-local storage adapters."""

from adoption_engine.infrastructure.adapters.storage.json_file_store import (
    JsonFileKeyValueStore,
)

__all__: list[str] = ["JsonFileKeyValueStore"]
