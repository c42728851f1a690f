"""Favorite toggle result."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ToggleStatus(Enum):
    """Whether a toggle ran or was refused because one was in flight."""

    APPLIED = "applied"
    BUSY = "busy"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of one favorite toggle.

    Attributes:
        pet_id: Toggled pet.
        status: APPLIED, or BUSY when a toggle for the pet was in flight.
        is_favorite: Flag value after the call.
    """

    pet_id: int
    status: ToggleStatus
    is_favorite: bool

    @property
    def applied(self) -> bool:
        return self.status == ToggleStatus.APPLIED
