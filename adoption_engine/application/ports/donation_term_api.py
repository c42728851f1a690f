"""Donation term API port.

One donation (responsibility) term per donor, required before listing pets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from adoption_engine.domain.models.donation_term import DonationCommitment

if TYPE_CHECKING:
    from adoption_engine.domain.models.donation_term import DonationTerm
    from adoption_engine.domain.models.email_delivery import EmailDeliveryReport


@dataclass(frozen=True)
class DonationTermRequest:
    """Payload for creating or re-signing a donation term.

    Attributes:
        donor_id: Signing donor (the authenticated user).
        motive: Reason for donating.
        signature: Typed full name.
        commitments: Commitments the donor accepted.
        adoption_conditions: Optional conditions imposed on adopters.
        observations: Optional free text.
    """

    donor_id: int
    motive: str
    signature: str
    commitments: frozenset[DonationCommitment] = field(default_factory=frozenset)
    adoption_conditions: str | None = None
    observations: str | None = None


@runtime_checkable
class DonationTermApiProtocol(Protocol):
    """Protocol for donation term operations.

    All methods raise RemoteCallError on backend or transport failure.
    """

    async def get_my_term(self, donor_id: int) -> DonationTerm | None:
        """Fetch the donor's term, or None when none exists."""
        ...

    async def create_or_update_term(
        self, request: DonationTermRequest, *, update: bool = False
    ) -> DonationTerm:
        """Create the donor's term, or re-sign it when ``update`` is set."""
        ...

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        """Email the term (as PDF) to the donor."""
        ...
