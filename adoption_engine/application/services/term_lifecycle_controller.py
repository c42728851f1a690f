"""Adoption term lifecycle controller.

One controller per (pet, adopter) pair and viewer. The adopter signs a
term with the pet's donor, the backend emails it to both of them, and
only then may the two parties communicate.

Usage:
    controller = terms.for_adoption(pet_id=42, adopter_id=20)
    await controller.open()
    if controller.state == TermState.DRAFTING:
        await controller.submit(signature="Bruno Lima")
    await controller.send_email()
    assert controller.can_communicate
"""

from __future__ import annotations

from typing import Any

from adoption_engine.application.ports.adoption_term_api import (
    AdoptionTermApiProtocol,
    AdoptionTermRequest,
)
from adoption_engine.application.ports.user_api import UserApiProtocol
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.local_term_cache import LocalTermCache
from adoption_engine.application.services.pet_catalog_service import PetCatalogService
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.application.services.term_controller_base import TermControllerBase
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.term import SelfAdoptionError
from adoption_engine.domain.errors.validation import TermValidationError
from adoption_engine.domain.exceptions import AdoptionEngineError
from adoption_engine.domain.models.email_delivery import EmailDeliveryReport
from adoption_engine.domain.models.party import PartyProfile, PartyRole
from adoption_engine.domain.models.remote_error import ErrorKind
from adoption_engine.domain.models.term_lifecycle import TermMachine, TermState


def adoption_term_key(pet_id: int, adopter_id: int) -> tuple[str, int, int]:
    """Lock key shared by every controller of one adoption term."""
    return ("adoption_term", pet_id, adopter_id)


class TermLifecycleController(TermControllerBase):
    """Adoption term state for one (pet, adopter) pair."""

    expected_roles = (PartyRole.DONOR, PartyRole.ADOPTER)

    def __init__(
        self,
        pet_id: int,
        adopter_id: int,
        term_api: AdoptionTermApiProtocol,
        user_api: UserApiProtocol,
        catalog: PetCatalogService,
        term_cache: LocalTermCache,
        sponsor_gate: SponsorGateService,
        locks: KeyedLock,
        viewer_id: int | None = None,
    ) -> None:
        super().__init__(
            term_key=adoption_term_key(pet_id, adopter_id),
            viewer_id=viewer_id if viewer_id is not None else adopter_id,
            user_api=user_api,
            locks=locks,
            sponsor_gate=sponsor_gate,
            component="adoption_term",
        )
        self.pet_id = pet_id
        self.adopter_id = adopter_id
        self._api = term_api
        self._catalog = catalog
        self._cache = term_cache

    @property
    def can_communicate(self) -> bool:
        """Messaging between donor and adopter unlocks once the term is EMAILED."""
        return self.state == TermState.EMAILED

    async def submit(self, signature: str, observations: str | None = None) -> TermMachine:
        """Sign the term (or re-sign a stale one).

        Args:
            signature: Typed full name; must not be blank.
            observations: Optional observations.

        Returns:
            The machine, CREATED (or EMAILED when the term already existed
            and was delivered).

        Raises:
            TermValidationError: If the signature is blank (no remote call).
            SelfAdoptionError: If the adopter owns the pet (terminal).
            SessionExpiredError: If the session expired.
            TermServiceUnavailableError: On retryable failures (stays DRAFTING).
        """
        signature = (signature or "").strip()
        if not signature:
            raise TermValidationError(["signature"])
        notes = (observations or "").strip() or None

        async def call(update: bool) -> Any:
            request = AdoptionTermRequest(
                pet_id=self.pet_id,
                adopter_id=self.adopter_id,
                signature=signature,
                observations=notes,
            )
            return await self._api.create_or_update_term(request, update=update)

        return await self._submit(signature, notes, call)

    async def _fetch(self) -> Any:
        return await self._api.get_term_by_pet(self.pet_id, self._viewer_id)

    async def _send(self, term_id: int) -> EmailDeliveryReport:
        return await self._api.send_term_email(term_id)

    async def _emailed_hint(self) -> bool:
        return await self._cache.contains(self._viewer_id, self.pet_id)

    async def _record_emailed(self) -> None:
        await self._cache.record(self._viewer_id, self.pet_id)

    async def _live_profiles(self) -> dict[PartyRole, PartyProfile | None]:
        pet = await self._catalog.get_pet(self.pet_id)
        return await self._profiles_for(
            {PartyRole.DONOR: pet.owner_id, PartyRole.ADOPTER: self.adopter_id}
        )

    def _submit_error(self, exc: RemoteCallError) -> AdoptionEngineError:
        if exc.kind == ErrorKind.SELF_ADOPTION:
            error = SelfAdoptionError(self.pet_id, self.adopter_id, exc.message)
            self._terminal_error = error
            return error
        return super()._submit_error(exc)
