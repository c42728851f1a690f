"""Bootstrap wiring for the adoption engine.

Builds every service over one set of ports and one keyed lock so that
favorite toggles and term operations exclude each other across screens.
The process-wide engine is a lazily built singleton, replaceable in
tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from dotenv import load_dotenv

from adoption_engine.application.ports.adoption_term_api import AdoptionTermApiProtocol
from adoption_engine.application.ports.donation_term_api import DonationTermApiProtocol
from adoption_engine.application.ports.favorite_api import FavoriteApiProtocol
from adoption_engine.application.ports.key_value_store import KeyValueStoreProtocol
from adoption_engine.application.ports.my_pets_api import MyPetsApiProtocol
from adoption_engine.application.ports.pet_api import PetApiProtocol
from adoption_engine.application.ports.reference_data_api import (
    ReferenceDataApiProtocol,
)
from adoption_engine.application.ports.sponsor_presenter import SponsorPresenterProtocol
from adoption_engine.application.ports.user_api import UserApiProtocol
from adoption_engine.application.services.adoption_request_service import (
    AdoptionRequestService,
)
from adoption_engine.application.services.device_session import DeviceSession
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
from adoption_engine.bootstrap.logging import configure_structlog
from adoption_engine.config.engine_config import EngineConfig
from adoption_engine.infrastructure.adapters.http.adoption_api_client import (
    AdoptionApiClient,
    DonationTermApiClient,
)
from adoption_engine.infrastructure.adapters.storage.json_file_store import (
    JsonFileKeyValueStore,
)


class BackendPorts:
    """Structural bundle of the remote ports one backend object provides."""

    def __init__(
        self,
        pets: PetApiProtocol,
        references: ReferenceDataApiProtocol,
        favorites: FavoriteApiProtocol,
        adoption_terms: AdoptionTermApiProtocol,
        donation_terms: DonationTermApiProtocol,
        my_pets: MyPetsApiProtocol,
        users: UserApiProtocol,
    ) -> None:
        self.pets = pets
        self.references = references
        self.favorites = favorites
        self.adoption_terms = adoption_terms
        self.donation_terms = donation_terms
        self.my_pets = my_pets
        self.users = users

    @classmethod
    def from_backend(cls, backend: Any, donation_terms: DonationTermApiProtocol) -> BackendPorts:
        """Use one object implementing every port except donation terms."""
        return cls(
            pets=backend,
            references=backend,
            favorites=backend,
            adoption_terms=backend,
            donation_terms=donation_terms,
            my_pets=backend,
            users=backend,
        )


@dataclass
class AdoptionEngine:
    """Wired services for one device."""

    config: EngineConfig
    session: DeviceSession
    term_cache: LocalTermCache
    pet_store: LocalPetStore
    catalog: PetCatalogService
    reference_data: ReferenceDataService
    favorites: FavoriteToggleService
    sponsor_gate: SponsorGateService
    terms: TermControllerFactory
    adoptions: AdoptionRequestService
    api_client: AdoptionApiClient | None = None

    async def aclose(self) -> None:
        if self.api_client is not None:
            await self.api_client.aclose()


def wire_engine(
    config: EngineConfig,
    store: KeyValueStoreProtocol,
    ports: BackendPorts,
    presenter: SponsorPresenterProtocol | None = None,
    session: DeviceSession | None = None,
) -> AdoptionEngine:
    """Assemble the services over already built ports."""
    session = session or DeviceSession(store)
    locks = KeyedLock()
    pet_store = LocalPetStore(resort_delay_seconds=config.favorite_resort_delay_seconds)
    catalog = PetCatalogService(ports.pets, ports.favorites, pet_store, session)
    sponsor_gate = SponsorGateService(presenter)
    term_cache = LocalTermCache(store)
    return AdoptionEngine(
        config=config,
        session=session,
        term_cache=term_cache,
        pet_store=pet_store,
        catalog=catalog,
        reference_data=ReferenceDataService(ports.references),
        favorites=FavoriteToggleService(ports.favorites, catalog, session, locks),
        sponsor_gate=sponsor_gate,
        terms=TermControllerFactory(
            adoption_terms=ports.adoption_terms,
            donation_terms=ports.donation_terms,
            users=ports.users,
            catalog=catalog,
            term_cache=term_cache,
            sponsor_gate=sponsor_gate,
            locks=locks,
        ),
        adoptions=AdoptionRequestService(ports.my_pets, ports.pets, catalog, sponsor_gate),
    )


def build_engine(
    config: EngineConfig | None = None,
    *,
    store: KeyValueStoreProtocol | None = None,
    presenter: SponsorPresenterProtocol | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AdoptionEngine:
    """Build the production engine: HTTP backend and JSON device store.

    Loads ``.env`` and reads EngineConfig from the environment when no
    config is given.
    """
    if config is None:
        load_dotenv()
        config = EngineConfig.from_environment()
    configure_structlog(config)

    store = store or JsonFileKeyValueStore(config.device_store_path)
    session = DeviceSession(store)
    client = AdoptionApiClient(config, session, transport=transport)
    ports = BackendPorts.from_backend(client, DonationTermApiClient(client))
    engine = wire_engine(config, store, ports, presenter=presenter, session=session)
    engine.api_client = client
    return engine


_engine: AdoptionEngine | None = None


def get_engine() -> AdoptionEngine:
    """Get the process-wide engine, building it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def set_engine(engine: AdoptionEngine) -> None:
    """Set a custom engine (for testing)."""
    global _engine
    _engine = engine


def reset_engine() -> None:
    """Reset the singleton instance for testing."""
    global _engine
    _engine = None
