"""Donation term domain model.

One responsibility term per donor user, required before the user may
list any pet. Same staleness rule as adoption terms: when the donor's
profile changes, the term must be re-signed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping

from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot


class DonationCommitment(str, Enum):
    """Commitments a donor must accept (backend request field names)."""

    LEGAL_GUARDIAN = "confirmaResponsavelLegal"
    ALLOWS_VISITS = "autorizaVisitas"
    ACCEPTS_FOLLOW_UP = "aceitaAcompanhamento"
    CONFIRMS_HEALTH = "confirmaSaude"
    ALLOWS_VERIFICATION = "autorizaVerificacao"
    KEEPS_CONTACT = "compromesteContato"


ALL_COMMITMENTS: frozenset[DonationCommitment] = frozenset(DonationCommitment)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class DonationTerm:
    """Signed donor responsibility record.

    Attributes:
        id: Backend term id.
        donor_id: User id of the donor.
        donor: Donor data frozen at signature time.
        motive: Reason for donating.
        signature: Typed full name.
        adoption_conditions: Optional conditions imposed on adopters.
        observations: Optional free text.
        content_hash: Document hash computed by the backend.
        created_at: Signature timestamp.
        email_sent_at: When the term was emailed, if known.
    """

    id: int
    donor_id: int
    donor: PartySnapshot
    motive: str
    signature: str
    adoption_conditions: str | None = None
    observations: str | None = None
    content_hash: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    email_sent_at: datetime | None = None

    @property
    def key(self) -> int:
        return self.donor_id

    @property
    def is_emailed(self) -> bool:
        return self.email_sent_at is not None

    def snapshots(self) -> dict[PartyRole, PartySnapshot]:
        return {PartyRole.DONOR: self.donor}

    def stale_parties(
        self, live: Mapping[PartyRole, PartyProfile | None]
    ) -> tuple[PartyRole, ...]:
        profile = live.get(PartyRole.DONOR)
        if profile is not None and profile.diverges_from(self.donor):
            return (PartyRole.DONOR,)
        return ()
