"""Application services for the adoption engine.

Available services:
- FavoriteToggleService: optimistic favorite toggles with rollback
- TermLifecycleController / DonationTermController: term state machines
- TermControllerFactory: controllers sharing one keyed lock
- AdoptionRequestService: adoption requests and messaging hand-off
- SponsorGateService: sponsor interstitial
- PetCatalogService, LocalPetStore, ReferenceDataService: pet data
- DeviceSession, LocalTermCache: device-persisted state
"""

from adoption_engine.application.services.adoption_request_service import (
    AdoptionRequestService,
)
from adoption_engine.application.services.device_session import DeviceSession
from adoption_engine.application.services.donation_term_controller import (
    DonationTermController,
)
from adoption_engine.application.services.favorite_toggle_service import (
    FavoriteToggleService,
)
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.local_pet_store import LocalPetStore
from adoption_engine.application.services.local_term_cache import LocalTermCache
from adoption_engine.application.services.pet_catalog_service import PetCatalogService
from adoption_engine.application.services.reference_data_service import (
    ReferenceDataService,
)
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.application.services.term_controller_factory import (
    TermControllerFactory,
)
from adoption_engine.application.services.term_lifecycle_controller import (
    TermLifecycleController,
)

__all__: list[str] = [
    "AdoptionRequestService",
    "DeviceSession",
    "DonationTermController",
    "FavoriteToggleService",
    "KeyedLock",
    "LocalPetStore",
    "LocalTermCache",
    "PetCatalogService",
    "ReferenceDataService",
    "SponsorGateService",
    "TermControllerFactory",
    "TermLifecycleController",
]
