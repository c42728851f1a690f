"""Pet API port.

Read and status-write access to the backend's pet listings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adoption_engine.domain.models.pet import Pet, PetStatus


@runtime_checkable
class PetApiProtocol(Protocol):
    """Protocol for pet listing operations.

    All methods raise RemoteCallError on backend or transport failure.
    """

    async def get_pet(self, pet_id: int) -> Pet | None:
        """Fetch one pet, or None when the backend does not know it."""
        ...

    async def list_pets_by_status(self, status: PetStatus) -> list[Pet]:
        """List pets currently in the given status."""
        ...

    async def list_pets_by_owner(self, owner_id: int) -> list[Pet]:
        """List pets registered by a donor."""
        ...

    async def update_status(self, pet_id: int, status: PetStatus) -> None:
        """Move a pet to a new status.

        Args:
            pet_id: Pet to update.
            status: Target status.
        """
        ...
