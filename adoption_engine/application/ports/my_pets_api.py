"""My-pets API port (adoption request association)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MyPetsApiProtocol(Protocol):
    """Protocol for the user-to-pet adoption association."""

    async def add_my_pet(self, pet_id: int, user_id: int, *, force: bool = False) -> None:
        """Associate a pet with the requesting user.

        Args:
            pet_id: Requested pet.
            user_id: Requesting user.
            force: Bypass the adoption history block (readoption).

        Raises:
            RemoteCallError: ALREADY_EXISTS for a duplicate, SELF_ADOPTION for
                the owner, READOPTION when history blocks the request.
        """
        ...
