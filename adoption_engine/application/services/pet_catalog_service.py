"""Pet catalog service.

Fills the local pet store from the backend and runs the owner-side
"offer for adoption" action (DRAFT -> AVAILABLE), which requires the
owner's donation term to be delivered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adoption_engine.application.ports.favorite_api import FavoriteApiProtocol
from adoption_engine.application.ports.pet_api import PetApiProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.application.services.device_session import DeviceSession
from adoption_engine.application.services.local_pet_store import LocalPetStore
from adoption_engine.application.services.remote_errors import raise_if_session_expired
from adoption_engine.domain.errors.favorite import ActionNotPermittedError, PetNotFoundError
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.domain.services.pet_status_guard import permitted_actions

if TYPE_CHECKING:
    from adoption_engine.application.services.donation_term_controller import (
        DonationTermController,
    )


class PetCatalogService(LoggingMixin):
    """Reads pets into the local store and offers owned pets for adoption."""

    def __init__(
        self,
        pet_api: PetApiProtocol,
        favorite_api: FavoriteApiProtocol,
        store: LocalPetStore,
        session: DeviceSession,
    ) -> None:
        self._pets = pet_api
        self._favorites = favorite_api
        self._store = store
        self._session = session
        self._init_logger(component="catalog")

    @property
    def store(self) -> LocalPetStore:
        return self._store

    async def get_pet(self, pet_id: int) -> Pet:
        """Return the cached pet, fetching and caching it when absent.

        Raises:
            PetNotFoundError: If the backend does not know the pet.
            SessionExpiredError: If the session expired.
            RemoteCallError: On other remote failures.
        """
        cached = self._store.get(pet_id)
        if cached is not None:
            return cached
        try:
            pet = await self._pets.get_pet(pet_id)
        except RemoteCallError as exc:
            raise_if_session_expired(exc, "get_pet")
            raise
        if pet is None:
            raise PetNotFoundError(pet_id)
        self._store.upsert(pet)
        return self._store.get(pet_id) or pet

    async def refresh(self, status: PetStatus = PetStatus.AVAILABLE) -> list[Pet]:
        """Full fetch of a status listing, reconciled with the viewer's favorites."""
        log = self._log_operation("refresh", status=status.name)
        viewer_id = await self._session.user_id()
        try:
            pets = await self._pets.list_pets_by_status(status)
            favorite_ids = (
                await self._favorites.list_favorites(viewer_id)
                if viewer_id is not None
                else []
            )
        except RemoteCallError as exc:
            raise_if_session_expired(exc, "refresh")
            log.warning("catalog_refresh_failed", error=exc.message, kind=exc.kind.value)
            raise
        self._store.reconcile(pets, favorite_ids)
        log.info("catalog_refreshed", pet_count=len(pets))
        return self._store.listing()

    async def refresh_owned(self, owner_id: int) -> list[Pet]:
        """Fetch the pets an owner registered and cache them."""
        try:
            pets = await self._pets.list_pets_by_owner(owner_id)
        except RemoteCallError as exc:
            raise_if_session_expired(exc, "refresh_owned")
            raise
        for pet in pets:
            self._store.upsert(pet)
        return pets

    async def offer_for_adoption(
        self, pet_id: int, donation_terms: DonationTermController
    ) -> Pet:
        """Move an owner's DRAFT pet to AVAILABLE.

        Args:
            pet_id: Pet to list.
            donation_terms: Controller of the owner's donation term.

        Returns:
            The patched pet.

        Raises:
            ActionNotPermittedError: If the viewer is not the owner or the
                pet is not in DRAFT.
            DonationTermRequiredError: If the donation term is not delivered.
        """
        log = self._log_operation("offer_for_adoption", pet_id=pet_id)
        viewer_id = await self._session.user_id()
        pet = await self.get_pet(pet_id)
        if not permitted_actions(pet, viewer_id).can_offer_for_adoption:
            raise ActionNotPermittedError(pet_id, "offer_for_adoption")
        donation_terms.ensure_can_list_pets()

        try:
            await self._pets.update_status(pet_id, PetStatus.AVAILABLE)
        except RemoteCallError as exc:
            raise_if_session_expired(exc, "offer_for_adoption")
            log.warning("pet_offer_failed", error=exc.message, kind=exc.kind.value)
            raise
        self._store.set_status(pet_id, PetStatus.AVAILABLE)
        log.info("pet_offered_for_adoption")
        return self._store.get(pet_id) or pet.with_status(PetStatus.AVAILABLE)
