"""Party profiles and term snapshots.

A term freezes each party's personal data at signature time. When the
live profile later diverges on name or contact, the term is stale and
must be re-signed; location changes alone do not invalidate it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PartyRole(str, Enum):
    """Role a user plays in a term."""

    DONOR = "donor"
    ADOPTER = "adopter"


@dataclass(frozen=True)
class PartySnapshot:
    """Personal data of one party as recorded in a term.

    Attributes:
        name: Full display name.
        email: Contact email.
        phone: Contact phone, optional.
        city: City name, optional.
        state: State name, optional.
    """

    name: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class PartyProfile:
    """Live profile of a user, fetched from the backend or device cache."""

    user_id: int
    name: str
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None

    def snapshot(self) -> PartySnapshot:
        """Freeze this profile into a term snapshot."""
        return PartySnapshot(
            name=self.name,
            email=self.email,
            phone=self.phone,
            city=self.city,
            state=self.state,
        )

    def diverges_from(self, snapshot: PartySnapshot) -> bool:
        """Check whether name or contact differ from a stored snapshot.

        Comparison ignores surrounding whitespace and email case. A field
        missing from the snapshot is not compared.
        """
        if _norm(self.name) != _norm(snapshot.name):
            return True
        if snapshot.email is not None and _norm(self.email).lower() != _norm(
            snapshot.email
        ).lower():
            return True
        if snapshot.phone is not None and _digits(self.phone) != _digits(
            snapshot.phone
        ):
            return True
        return False


def _norm(value: str | None) -> str:
    return (value or "").strip()


def _digits(value: str | None) -> str:
    return "".join(ch for ch in (value or "") if ch.isdigit())
