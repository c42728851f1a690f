"""Favorite API port.

A favorite is the presence of a (user, pet) relation on the backend.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FavoriteApiProtocol(Protocol):
    """Protocol for favorite relations.

    add_favorite raises RemoteCallError classified ALREADY_EXISTS when the
    relation exists; remove_favorite raises NOT_FOUND when it does not.
    """

    async def is_favorite(self, user_id: int, pet_id: int) -> bool:
        """Check whether the relation exists."""
        ...

    async def add_favorite(self, user_id: int, pet_id: int) -> None:
        """Create the relation."""
        ...

    async def remove_favorite(self, user_id: int, pet_id: int) -> None:
        """Delete the relation."""
        ...

    async def list_favorites(self, user_id: int) -> list[int]:
        """Pet ids the user favorited."""
        ...
