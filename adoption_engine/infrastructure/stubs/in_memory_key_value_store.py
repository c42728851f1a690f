"""In-memory key/value store stub for testing.

Same contract as the JSON file store without touching disk. Values are
deep-copied on the way in and out so callers cannot mutate stored state.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable


class InMemoryKeyValueStore:
    """KeyValueStoreProtocol stub backed by a dict.

    Example:
        >>> store = InMemoryKeyValueStore({"@App:userId": 20})
        >>> await store.get("@App:userId")
        20
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self.write_count = 0

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.write_count += 1

    async def union(self, key: str, values: Iterable[Any]) -> list[Any]:
        current = self._data.get(key)
        merged = list(current) if isinstance(current, list) else []
        for value in values:
            if value not in merged:
                merged.append(value)
        self._data[key] = merged
        self.write_count += 1
        return list(merged)

    async def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Copy of the whole store, for assertions."""
        return copy.deepcopy(self._data)
