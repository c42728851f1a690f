"""Email delivery report for term sends.

The backend sends a term to every party in a single call. The report
states, per recipient, whether the backend accepted the message. A send
is complete only when every expected recipient was accepted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from adoption_engine.domain.models.party import PartyRole


@dataclass(frozen=True)
class RecipientStatus:
    """Delivery outcome for one party.

    Attributes:
        role: Party the message was addressed to.
        address: Email address, when the backend reported it.
        accepted: Whether the backend accepted the message for delivery.
    """

    role: PartyRole
    address: str | None
    accepted: bool


@dataclass(frozen=True)
class EmailDeliveryReport:
    """Outcome of one term email send."""

    term_id: int
    recipients: tuple[RecipientStatus, ...]
    sent_at: datetime | None = None

    def recipient(self, role: PartyRole) -> RecipientStatus | None:
        """Status for a role, or None when the backend did not mention it."""
        for status in self.recipients:
            if status.role == role:
                return status
        return None

    def failed_roles(self, expected: tuple[PartyRole, ...]) -> tuple[PartyRole, ...]:
        """Expected roles that were not accepted (or not reported at all)."""
        failed = []
        for role in expected:
            status = self.recipient(role)
            if status is None or not status.accepted:
                failed.append(role)
        return tuple(failed)

    def is_complete(self, expected: tuple[PartyRole, ...]) -> bool:
        """Whether every expected recipient was accepted."""
        return not self.failed_roles(expected)
