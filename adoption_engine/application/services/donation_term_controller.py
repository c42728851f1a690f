"""Donation term controller.

A donor signs one responsibility term before listing any pet. Same
lifecycle as the adoption term, with a single recipient (the donor) and
a richer form: a motive plus six commitments that must all be accepted.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from adoption_engine.application.ports.donation_term_api import (
    DonationTermApiProtocol,
    DonationTermRequest,
)
from adoption_engine.application.ports.user_api import UserApiProtocol
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.application.services.term_controller_base import TermControllerBase
from adoption_engine.domain.errors.term import DonationTermRequiredError
from adoption_engine.domain.errors.validation import TermValidationError
from adoption_engine.domain.models.donation_term import ALL_COMMITMENTS, DonationCommitment
from adoption_engine.domain.models.email_delivery import EmailDeliveryReport
from adoption_engine.domain.models.party import PartyProfile, PartyRole
from adoption_engine.domain.models.term_lifecycle import TermMachine, TermState


def donation_term_key(donor_id: int) -> tuple[str, int]:
    return ("donation_term", donor_id)


class DonationTermController(TermControllerBase):
    """Donation term state for one donor."""

    expected_roles = (PartyRole.DONOR,)

    def __init__(
        self,
        donor_id: int,
        term_api: DonationTermApiProtocol,
        user_api: UserApiProtocol,
        sponsor_gate: SponsorGateService,
        locks: KeyedLock,
    ) -> None:
        super().__init__(
            term_key=donation_term_key(donor_id),
            viewer_id=donor_id,
            user_api=user_api,
            locks=locks,
            sponsor_gate=sponsor_gate,
            component="donation_term",
        )
        self.donor_id = donor_id
        self._api = term_api

    @property
    def can_list_pets(self) -> bool:
        """EMAILED, or re-signed after an earlier delivery."""
        machine = self.machine
        if machine.state == TermState.EMAILED:
            return True
        return (
            machine.state == TermState.CREATED
            and machine.resigned
            and machine.was_emailed
        )

    def ensure_can_list_pets(self) -> None:
        """Raise DonationTermRequiredError unless the donor may list pets."""
        if not self.can_list_pets:
            self._log_operation("ensure_can_list_pets", state=self.state.value).info(
                "donation_term_required"
            )
            raise DonationTermRequiredError(self.donor_id)

    async def submit(
        self,
        motive: str,
        signature: str,
        commitments: Iterable[DonationCommitment],
        adoption_conditions: str | None = None,
        observations: str | None = None,
    ) -> TermMachine:
        """Sign the donation term (or re-sign a stale one).

        Raises:
            TermValidationError: If motive or signature is blank, or any
                commitment was not accepted (no remote call).
            SessionExpiredError: If the session expired.
            TermServiceUnavailableError: On retryable failures.
        """
        motive = (motive or "").strip()
        signature = (signature or "").strip()
        accepted = frozenset(commitments)

        missing: list[str] = []
        if not motive:
            missing.append("motive")
        if not signature:
            missing.append("signature")
        missing.extend(sorted(c.value for c in ALL_COMMITMENTS - accepted))
        if missing:
            raise TermValidationError(missing)

        notes = (observations or "").strip() or None
        conditions = (adoption_conditions or "").strip() or None

        async def call(update: bool) -> Any:
            request = DonationTermRequest(
                donor_id=self.donor_id,
                motive=motive,
                signature=signature,
                commitments=accepted,
                adoption_conditions=conditions,
                observations=notes,
            )
            return await self._api.create_or_update_term(request, update=update)

        return await self._submit(signature, notes, call)

    async def _fetch(self) -> Any:
        return await self._api.get_my_term(self.donor_id)

    async def _send(self, term_id: int) -> EmailDeliveryReport:
        return await self._api.send_term_email(term_id)

    async def _live_profiles(self) -> dict[PartyRole, PartyProfile | None]:
        return await self._profiles_for({PartyRole.DONOR: self.donor_id})
