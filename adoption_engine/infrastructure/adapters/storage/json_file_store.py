"""JSON file key/value store.

Durable device storage backed by a single JSON document. Every write
rewrites the document to a temporary sibling and swaps it in with
``os.replace`` so a crash never leaves a truncated file behind.

All calls are serialized by one asyncio.Lock, which makes ``union`` a
single read-modify-write with respect to other calls on the same store.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Iterable

from adoption_engine.infrastructure.observability.logging import (
    get_logger_for_component,
)


class JsonFileKeyValueStore:
    """KeyValueStoreProtocol implementation persisted to one JSON file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._data: dict[str, Any] | None = None
        self._log = get_logger_for_component("JsonFileKeyValueStore", "storage")

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            return self._load().get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = self._load()
            data[key] = value
            self._write(data)

    async def union(self, key: str, values: Iterable[Any]) -> list[Any]:
        async with self._lock:
            data = self._load()
            current = data.get(key)
            merged = list(current) if isinstance(current, list) else []
            for value in values:
                if value not in merged:
                    merged.append(value)
            data[key] = merged
            self._write(data)
            return list(merged)

    async def remove(self, *keys: str) -> None:
        async with self._lock:
            data = self._load()
            removed = [key for key in keys if data.pop(key, None) is not None]
            if removed:
                self._write(data)

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self._path.exists():
            self._data = {}
            return self._data
        try:
            loaded = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            # Unreadable state is dropped; the device starts logged out.
            self._log.warning("device_store_corrupt", path=str(self._path), error=str(exc))
            loaded = {}
        self._data = loaded if isinstance(loaded, dict) else {}
        return self._data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)
        self._log.debug("device_store_written", path=str(self._path), keys=len(data))
