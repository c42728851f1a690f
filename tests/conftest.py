"""
Pytest configuration and shared fixtures for adoption engine tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Remote ports are replaced by the in-memory backend stub
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/

Shared cast:
- Ana (user 10) is the donor of Rex (pet 42), listed as AVAILABLE
- Bruno Lima (user 20) is the logged-in prospective adopter
"""

import pytest

from adoption_engine.application.services.device_session import DeviceSession
from adoption_engine.bootstrap.container import AdoptionEngine, BackendPorts, wire_engine
from adoption_engine.config.engine_config import TEST_ENGINE_CONFIG
from adoption_engine.domain.models.party import PartyProfile
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.infrastructure.stubs.adoption_backend_stub import (
    InMemoryAdoptionBackend,
)
from adoption_engine.infrastructure.stubs.in_memory_key_value_store import (
    InMemoryKeyValueStore,
)
from adoption_engine.infrastructure.stubs.sponsor_presenter_stub import (
    SponsorPresenterStub,
)

DONOR_ID = 10
ADOPTER_ID = 20
PET_ID = 42


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from adoption_engine import __version__

    return __version__


@pytest.fixture
def donor_profile() -> PartyProfile:
    return PartyProfile(
        user_id=DONOR_ID,
        name="Ana",
        email="ana@example.org",
        phone="(19) 99999-0000",
        city="Campinas",
        state="São Paulo",
    )


@pytest.fixture
def adopter_profile() -> PartyProfile:
    return PartyProfile(
        user_id=ADOPTER_ID,
        name="Bruno Lima",
        email="bruno@example.org",
        phone="(19) 98888-0000",
    )


@pytest.fixture
def backend(
    donor_profile: PartyProfile, adopter_profile: PartyProfile
) -> InMemoryAdoptionBackend:
    """Provide a backend stub with Ana, Bruno and Rex."""
    backend = InMemoryAdoptionBackend()
    backend.add_user(donor_profile)
    backend.add_user(adopter_profile)
    backend.add_pet(
        Pet(id=PET_ID, owner_id=DONOR_ID, status_code=int(PetStatus.AVAILABLE), name="Rex")
    )
    return backend


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
async def session(
    kv_store: InMemoryKeyValueStore, adopter_profile: PartyProfile
) -> DeviceSession:
    """Provide a device session logged in as Bruno."""
    session = DeviceSession(kv_store)
    await session.start(adopter_profile, token="token-bruno")
    return session


@pytest.fixture
def presenter() -> SponsorPresenterStub:
    return SponsorPresenterStub()


@pytest.fixture
def engine(
    backend: InMemoryAdoptionBackend,
    kv_store: InMemoryKeyValueStore,
    session: DeviceSession,
    presenter: SponsorPresenterStub,
) -> AdoptionEngine:
    """Provide every service wired over the backend stub."""
    ports = BackendPorts.from_backend(backend, backend.donation_api)
    return wire_engine(
        TEST_ENGINE_CONFIG, kv_store, ports, presenter=presenter, session=session
    )
