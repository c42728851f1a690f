"""Adoption term domain model.

One legal record per (pet, adopter) pair. The record is created and
mutated only by the backend; the client reads it, checks it for
staleness and asks the backend to email it to both parties.

Invariants:
- At most one AdoptionTerm exists per (pet_id, adopter_id).
- A term is never deleted because of staleness, only re-signed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping

from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class AdoptionTerm:
    """Signed commitment between a pet's donor and a prospective adopter.

    Attributes:
        id: Backend term id.
        pet_id: Pet the term refers to.
        adopter_id: User id of the adopter who signed.
        donor: Donor data frozen at signature time.
        adopter: Adopter data frozen at signature time.
        signature: Free-text digital signature (typed full name).
        observations: Optional free-text observations.
        content_hash: Document hash computed by the backend.
        created_at: Signature timestamp.
        email_sent_at: When both parties were emailed, if known.
        name_outdated: Backend hint that a party's name changed since signing.
    """

    id: int
    pet_id: int
    adopter_id: int
    donor: PartySnapshot
    adopter: PartySnapshot
    signature: str
    observations: str | None = None
    content_hash: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    email_sent_at: datetime | None = None
    name_outdated: bool = False

    @property
    def key(self) -> tuple[int, int]:
        """Identity of the (pet, adopter) pair this term belongs to."""
        return (self.pet_id, self.adopter_id)

    @property
    def is_emailed(self) -> bool:
        """Whether the backend reports the term as delivered."""
        return self.email_sent_at is not None

    def snapshots(self) -> dict[PartyRole, PartySnapshot]:
        """Stored party snapshots keyed by role."""
        return {PartyRole.DONOR: self.donor, PartyRole.ADOPTER: self.adopter}

    def stale_parties(
        self, live: Mapping[PartyRole, PartyProfile | None]
    ) -> tuple[PartyRole, ...]:
        """Roles whose live profile no longer matches the stored snapshot.

        Args:
            live: Current profiles keyed by role. Missing or None profiles
                are not compared.

        Returns:
            Diverging roles in donor, adopter order. When the backend
            flags the name as outdated and no profile diverges locally,
            the adopter is reported.
        """
        stale = tuple(
            role
            for role, snapshot in self.snapshots().items()
            if (profile := live.get(role)) is not None
            and profile.diverges_from(snapshot)
        )
        if not stale and self.name_outdated:
            return (PartyRole.ADOPTER,)
        return stale
