"""Adoption request orchestrator.

Adds a pet to the requesting user's "my pets" list and, once the
adoption term is delivered, completes the adoption and hands off to
messaging.

Constraints:
- The pet status guard runs first; a blocked request makes no remote call.
- Optimistic-first: the association is created directly and the
  backend's refusal is classified into an AdoptionOutcome.
- Concurrent requests for the same pet and user share one remote call;
  the later callers see ALREADY_ADDED when the first one added.
- The ADOPTED status write is best-effort and never blocks the hand-off.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import replace
from typing import Any

from adoption_engine.application.ports.my_pets_api import MyPetsApiProtocol
from adoption_engine.application.ports.pet_api import PetApiProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.application.services.pet_catalog_service import PetCatalogService
from adoption_engine.application.services.remote_errors import raise_if_session_expired
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.application.services.term_lifecycle_controller import (
    TermLifecycleController,
)
from adoption_engine.domain.errors.favorite import ActionNotPermittedError
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.session import SessionExpiredError
from adoption_engine.domain.errors.term import CommunicationLockedError
from adoption_engine.domain.models.adoption_request import (
    AdoptionOutcome,
    AdoptionRequestResult,
    HandoffResult,
)
from adoption_engine.domain.models.pet import PetStatus
from adoption_engine.domain.models.remote_error import ErrorKind
from adoption_engine.domain.services.pet_status_guard import permitted_actions
from adoption_engine.infrastructure.observability.correlation import correlation_scope

OpenMessaging = Callable[[int, int], Awaitable[None]]

_OUTCOME_BY_KIND: dict[ErrorKind, AdoptionOutcome] = {
    ErrorKind.ALREADY_EXISTS: AdoptionOutcome.ALREADY_ADDED,
    ErrorKind.SELF_ADOPTION: AdoptionOutcome.BLOCKED,
    ErrorKind.FORBIDDEN: AdoptionOutcome.BLOCKED,
    ErrorKind.READOPTION: AdoptionOutcome.READOPTION_OFFERED,
}


class AdoptionRequestService(LoggingMixin):
    """Orchestrates adoption requests and the post-term hand-off."""

    def __init__(
        self,
        my_pets_api: MyPetsApiProtocol,
        pet_api: PetApiProtocol,
        catalog: PetCatalogService,
        sponsor_gate: SponsorGateService,
    ) -> None:
        self._my_pets = my_pets_api
        self._pets = pet_api
        self._catalog = catalog
        self._sponsor_gate = sponsor_gate
        self._in_flight: dict[tuple[int, int], asyncio.Task[AdoptionRequestResult]] = {}
        self._readoption_offers: set[tuple[int, int]] = set()
        self._init_logger(component="adoption")

    def has_readoption_offer(self, pet_id: int, user_id: int) -> bool:
        return (pet_id, user_id) in self._readoption_offers

    async def request_adopt(self, pet_id: int, user_id: int) -> AdoptionRequestResult:
        """Request adoption of a pet.

        Args:
            pet_id: Pet to adopt.
            user_id: Requesting user.

        Returns:
            AdoptionRequestResult with the mapped outcome.

        Raises:
            SessionExpiredError: If the session expired.
            PetNotFoundError: If the pet is unknown.
        """
        with correlation_scope():
            log = self._log_operation("request_adopt", pet_id=pet_id, user_id=user_id)
            pet = await self._catalog.get_pet(pet_id)
            if not permitted_actions(pet, user_id).can_request_adopt:
                log.info(
                    "adoption_request_blocked_by_guard",
                    status_code=pet.status_code,
                    is_owner=pet.is_owned_by(user_id),
                )
                return AdoptionRequestResult(
                    pet_id=pet_id,
                    user_id=user_id,
                    outcome=AdoptionOutcome.BLOCKED,
                    message="Pet cannot be requested by this user",
                )

            running = self._in_flight.get((pet_id, user_id))
            if running is not None:
                log.info("adoption_request_coalesced")
                return await _join(running)

            task = self._start(pet_id, user_id, self._create(pet_id, user_id, force=False))
            return await asyncio.shield(task)

    async def confirm_readoption(self, pet_id: int, user_id: int) -> AdoptionRequestResult:
        """Confirm a readoption after READOPTION_OFFERED.

        Presents the sponsor interstitial, then re-issues the request
        bypassing the history block. A confirmation arriving while another
        request for the same pet and user is running joins it instead of
        presenting the ad and creating again.

        Raises:
            ActionNotPermittedError: If no readoption was offered.
            SessionExpiredError: If the session expired.
        """
        with correlation_scope():
            log = self._log_operation("confirm_readoption", pet_id=pet_id, user_id=user_id)
            key = (pet_id, user_id)
            if key not in self._readoption_offers:
                raise ActionNotPermittedError(pet_id, "confirm_readoption")
            running = self._in_flight.get(key)
            if running is not None:
                log.info("readoption_confirmation_coalesced")
                return await _join(running)

            pet = await self._catalog.get_pet(pet_id)
            running = self._in_flight.get(key)
            if running is not None:
                log.info("readoption_confirmation_coalesced")
                return await _join(running)
            if not permitted_actions(pet, user_id).can_request_adopt:
                self._readoption_offers.discard(key)
                log.info("readoption_blocked_by_guard", status_code=pet.status_code)
                return AdoptionRequestResult(
                    pet_id=pet_id,
                    user_id=user_id,
                    outcome=AdoptionOutcome.BLOCKED,
                    message="Pet cannot be requested by this user",
                )

            log.info("readoption_confirmed")
            # Not shielded: leaving the interstitial cancels the forced create.
            return await self._start(pet_id, user_id, self._confirm(pet_id, user_id))

    async def complete_adoption(
        self, controller: TermLifecycleController, open_messaging: OpenMessaging
    ) -> HandoffResult:
        """Mark the pet adopted and open messaging between the parties.

        Args:
            controller: Adoption term controller; its term must be EMAILED.
            open_messaging: Hand-off callback receiving (pet_id, adopter_id).

        Raises:
            CommunicationLockedError: If the term is not EMAILED.
            ActionNotPermittedError: If the guard forbids communication.
            SessionExpiredError: If the session expired during the status write.
        """
        pet_id, adopter_id = controller.pet_id, controller.adopter_id
        with correlation_scope():
            log = self._log_operation(
                "complete_adoption", pet_id=pet_id, adopter_id=adopter_id
            )
            if not controller.can_communicate:
                log.info("communication_locked", state=controller.state.value)
                raise CommunicationLockedError(pet_id, adopter_id, controller.state)
            pet = await self._catalog.get_pet(pet_id)
            if not permitted_actions(pet, adopter_id).can_communicate:
                raise ActionNotPermittedError(pet_id, "communicate")

            status_updated = True
            status_error: str | None = None
            try:
                await self._pets.update_status(pet_id, PetStatus.ADOPTED)
            except RemoteCallError as exc:
                raise_if_session_expired(exc, "complete_adoption")
                status_updated = False
                status_error = exc.message
                log.warning(
                    "adoption_status_update_failed", kind=exc.kind.value, error=exc.message
                )
            if status_updated:
                self._catalog.store.set_status(pet_id, PetStatus.ADOPTED)

            await open_messaging(pet_id, adopter_id)
            log.info("adoption_handoff_completed", status_updated=status_updated)
            return HandoffResult(
                pet_id=pet_id,
                adopter_id=adopter_id,
                status_updated=status_updated,
                status_error=status_error,
                messaging_opened=True,
            )

    def _start(
        self, pet_id: int, user_id: int, work: Coroutine[Any, Any, AdoptionRequestResult]
    ) -> asyncio.Task[AdoptionRequestResult]:
        key = (pet_id, user_id)
        task = asyncio.create_task(work)
        self._in_flight[key] = task
        task.add_done_callback(lambda _: self._in_flight.pop(key, None))
        return task

    async def _confirm(self, pet_id: int, user_id: int) -> AdoptionRequestResult:
        await self._sponsor_gate.present()
        return await self._create(pet_id, user_id, force=True)

    async def _create(self, pet_id: int, user_id: int, force: bool) -> AdoptionRequestResult:
        log = self._log_operation("add_my_pet", pet_id=pet_id, user_id=user_id, force=force)
        key = (pet_id, user_id)
        try:
            await self._my_pets.add_my_pet(pet_id, user_id, force=force)
        except RemoteCallError as exc:
            kind = exc.kind
            if kind == ErrorKind.SESSION_EXPIRED:
                raise SessionExpiredError("request_adopt", exc.message) from exc
            outcome = _OUTCOME_BY_KIND.get(kind, AdoptionOutcome.RETRYABLE)
            if kind == ErrorKind.UNKNOWN:
                log.warning("adoption_request_unrecognized_error", error=exc.message)
            else:
                log.info("adoption_request_refused", kind=kind.value, outcome=outcome.value)
            if outcome == AdoptionOutcome.READOPTION_OFFERED:
                self._readoption_offers.add(key)
            return AdoptionRequestResult(
                pet_id=pet_id,
                user_id=user_id,
                outcome=outcome,
                message=exc.message,
                error_kind=kind,
            )

        self._readoption_offers.discard(key)
        log.info("adoption_request_added")
        return AdoptionRequestResult(
            pet_id=pet_id, user_id=user_id, outcome=AdoptionOutcome.ADDED
        )


async def _join(running: asyncio.Task[AdoptionRequestResult]) -> AdoptionRequestResult:
    """Wait for a running request; a success counts as already added."""
    first = await asyncio.shield(running)
    if first.outcome.is_success:
        return replace(first, outcome=AdoptionOutcome.ALREADY_ADDED)
    return first
