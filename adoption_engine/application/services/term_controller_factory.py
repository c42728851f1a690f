"""Builds term controllers that share one keyed lock.

Two screens opening the same (pet, adopter) term get separate
controllers, but their operations still exclude each other.
"""

from __future__ import annotations

from adoption_engine.application.ports.adoption_term_api import AdoptionTermApiProtocol
from adoption_engine.application.ports.donation_term_api import DonationTermApiProtocol
from adoption_engine.application.ports.user_api import UserApiProtocol
from adoption_engine.application.services.donation_term_controller import (
    DonationTermController,
)
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.local_term_cache import LocalTermCache
from adoption_engine.application.services.pet_catalog_service import PetCatalogService
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.application.services.term_lifecycle_controller import (
    TermLifecycleController,
)


class TermControllerFactory:
    """Creates adoption and donation term controllers."""

    def __init__(
        self,
        adoption_terms: AdoptionTermApiProtocol,
        donation_terms: DonationTermApiProtocol,
        users: UserApiProtocol,
        catalog: PetCatalogService,
        term_cache: LocalTermCache,
        sponsor_gate: SponsorGateService,
        locks: KeyedLock | None = None,
    ) -> None:
        self._adoption_terms = adoption_terms
        self._donation_terms = donation_terms
        self._users = users
        self._catalog = catalog
        self._term_cache = term_cache
        self._sponsor_gate = sponsor_gate
        self._locks = locks or KeyedLock()

    @property
    def locks(self) -> KeyedLock:
        return self._locks

    def for_adoption(
        self, pet_id: int, adopter_id: int, viewer_id: int | None = None
    ) -> TermLifecycleController:
        return TermLifecycleController(
            pet_id=pet_id,
            adopter_id=adopter_id,
            term_api=self._adoption_terms,
            user_api=self._users,
            catalog=self._catalog,
            term_cache=self._term_cache,
            sponsor_gate=self._sponsor_gate,
            locks=self._locks,
            viewer_id=viewer_id,
        )

    def for_donation(self, donor_id: int) -> DonationTermController:
        return DonationTermController(
            donor_id=donor_id,
            term_api=self._donation_terms,
            user_api=self._users,
            sponsor_gate=self._sponsor_gate,
            locks=self._locks,
        )
