"""User profile API port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adoption_engine.domain.models.party import PartyProfile


@runtime_checkable
class UserApiProtocol(Protocol):
    """Protocol for reading live user profiles."""

    async def get_profile(self, user_id: int) -> PartyProfile | None:
        """Fetch a user's current profile, or None when unknown.

        Raises:
            RemoteCallError: On backend or transport failure.
        """
        ...
