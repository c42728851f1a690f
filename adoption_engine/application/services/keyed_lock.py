"""Per-key non-blocking mutex map.

Coordinators use one KeyedLock to make operations on the same entity
sequential: a pet id for favorites, a (pet, adopter) pair or donor id
for terms. A second operation on a held key does not wait; the caller
decides whether that means "busy, no-op" or an error.

The event loop is single-threaded and acquisition never awaits, so the
check-and-claim is atomic.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class KeyedLock:
    """Set of currently held keys."""

    def __init__(self) -> None:
        self._held: set[Hashable] = set()

    def is_held(self, key: Hashable) -> bool:
        return key in self._held

    def try_acquire(self, key: Hashable) -> bool:
        """Claim a key if free.

        Returns:
            True if the key was claimed, False if it was already held.
        """
        if key in self._held:
            return False
        self._held.add(key)
        return True

    def release(self, key: Hashable) -> None:
        self._held.discard(key)

    @contextmanager
    def holding(self, key: Hashable) -> Iterator[bool]:
        """Claim a key for the duration of a block.

        Yields:
            True if this block owns the key. The key is released on exit
            only when it was claimed here.
        """
        acquired = self.try_acquire(key)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(key)

    @property
    def held_keys(self) -> frozenset[Hashable]:
        return frozenset(self._held)
