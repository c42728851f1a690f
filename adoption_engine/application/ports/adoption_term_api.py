"""Adoption term API port.

The backend keeps at most one adoption term per (pet, adopter). Creation
and re-signature share one call distinguished by the ``update`` flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adoption_engine.domain.models.adoption_term import AdoptionTerm
    from adoption_engine.domain.models.email_delivery import EmailDeliveryReport


@dataclass(frozen=True)
class AdoptionTermRequest:
    """Payload for creating or re-signing an adoption term.

    Attributes:
        pet_id: Pet the term refers to.
        adopter_id: Signing adopter (the authenticated user).
        signature: Typed full name.
        observations: Optional free text.
    """

    pet_id: int
    adopter_id: int
    signature: str
    observations: str | None = None


@runtime_checkable
class AdoptionTermApiProtocol(Protocol):
    """Protocol for adoption term operations.

    All methods raise RemoteCallError on backend or transport failure.
    """

    async def get_term_by_pet(self, pet_id: int, viewer_id: int) -> AdoptionTerm | None:
        """Fetch the term for a pet as visible to the viewer.

        Args:
            pet_id: Pet id.
            viewer_id: Authenticated user (donor or adopter of the term).

        Returns:
            The term, or None when none exists.
        """
        ...

    async def create_or_update_term(
        self, request: AdoptionTermRequest, *, update: bool = False
    ) -> AdoptionTerm:
        """Create a term, or re-sign the existing one when ``update`` is set.

        Raises:
            RemoteCallError: ALREADY_EXISTS when creating a duplicate,
                SELF_ADOPTION when the adopter owns the pet.
        """
        ...

    async def send_term_email(self, term_id: int) -> EmailDeliveryReport:
        """Email the term to donor and adopter in one call.

        Returns:
            Per-recipient delivery report. Partial failures are reported,
            not raised.
        """
        ...
