"""Pet domain model.

The backend owns pets; the client holds a read-mostly copy that is
patched optimistically (favorite flag, status) and replaced on the next
full fetch.

Status codes are the backend's numeric ids:
    1 DRAFT       registered, not yet offered
    2 AVAILABLE   listed for adoption
    3 PENDING     unspecified / in progress
    4 ADOPTED     adoption concluded
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum


class PetStatus(IntEnum):
    """Adoption status of a pet (backend status ids)."""

    DRAFT = 1
    AVAILABLE = 2
    PENDING = 3
    ADOPTED = 4

    @classmethod
    def from_code(cls, code: int | None) -> PetStatus | None:
        """Map a raw status code to a PetStatus.

        Args:
            code: Status id as delivered by the backend.

        Returns:
            The matching PetStatus, or None for unknown codes.
        """
        if code is None:
            return None
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(frozen=True, eq=True)
class Pet:
    """A pet listing as cached on the device.

    Attributes:
        id: Backend pet id.
        owner_id: User id of the donor who registered the pet.
        status_code: Raw backend status id (may be unknown to this client).
        name: Display name.
        breed_id: Breed reference id.
        age_band_id: Age band reference id.
        age: Age in years, when known.
        photo_url: Photo location, when uploaded.
        disease_ids: Disease / disability reference ids.
        is_favorite: Whether the current user favorited the pet (client-side).
    """

    id: int
    owner_id: int
    status_code: int
    name: str = ""
    breed_id: int | None = None
    age_band_id: int | None = None
    age: int | None = None
    photo_url: str | None = None
    disease_ids: tuple[int, ...] = field(default_factory=tuple)
    is_favorite: bool = False

    @property
    def status(self) -> PetStatus | None:
        """Known status, or None when the code is not recognized."""
        return PetStatus.from_code(self.status_code)

    def is_owned_by(self, user_id: int | None) -> bool:
        """Check whether the given user registered this pet."""
        return user_id is not None and user_id == self.owner_id

    def with_favorite(self, is_favorite: bool) -> Pet:
        """Return a copy with the favorite flag set."""
        return replace(self, is_favorite=is_favorite)

    def with_status(self, status: PetStatus) -> Pet:
        """Return a copy with the given status."""
        return replace(self, status_code=int(status))
