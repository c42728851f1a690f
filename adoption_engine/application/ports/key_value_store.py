"""Device key/value store port.

Durable device-local storage for session data, saved filters and the
local term cache. Values are JSON-compatible.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStoreProtocol(Protocol):
    """Protocol for device-local storage.

    Implementations must survive process restarts (except test stubs) and
    make ``union`` atomic with respect to other calls on the same store.
    """

    async def get(self, key: str) -> Any | None:
        """Return the stored value, or None when absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value."""
        ...

    async def union(self, key: str, values: Iterable[Any]) -> list[Any]:
        """Add values to the list stored under key, without duplicates.

        Returns:
            The stored list after the union.
        """
        ...

    async def remove(self, *keys: str) -> None:
        """Delete keys; missing keys are ignored."""
        ...
