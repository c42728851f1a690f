"""Favorite and guard errors."""

from __future__ import annotations

from adoption_engine.domain.exceptions import AdoptionEngineError


class ActionNotPermittedError(AdoptionEngineError):
    """Raised when the pet status guard forbids the requested action.

    Attributes:
        pet_id: Pet the action targeted.
        action: Name of the forbidden action.
    """

    def __init__(self, pet_id: int, action: str) -> None:
        self.pet_id = pet_id
        self.action = action
        super().__init__(f"Action {action} is not permitted for pet {pet_id}")


class PetNotFoundError(AdoptionEngineError):
    """Raised when a pet is neither cached locally nor known to the backend."""

    def __init__(self, pet_id: int) -> None:
        self.pet_id = pet_id
        super().__init__(f"Pet {pet_id} not found")


class FavoriteToggleError(AdoptionEngineError):
    """Raised after a failed favorite toggle was rolled back.

    Attributes:
        pet_id: Pet whose favorite flag was restored.
        restored: Flag value after rollback.
        detail: Raw backend or transport message.
    """

    def __init__(self, pet_id: int, restored: bool, detail: str = "") -> None:
        self.pet_id = pet_id
        self.restored = restored
        self.detail = detail
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Could not update favorite for pet {pet_id}{suffix}")
