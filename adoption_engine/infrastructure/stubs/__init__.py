"""Infrastructure stubs for development and testing.

Available stubs:
- InMemoryAdoptionBackend: Every remote port, with failure injection
- InMemoryKeyValueStore: Device storage without disk
- SponsorPresenterStub: Records presented ads, optionally holds them

WARNING: These stubs are NOT for production use.
Production implementations are in adoption_engine/infrastructure/adapters/.
"""

from adoption_engine.infrastructure.stubs.adoption_backend_stub import (
    DonationTermBackendView,
    InMemoryAdoptionBackend,
)
from adoption_engine.infrastructure.stubs.in_memory_key_value_store import (
    InMemoryKeyValueStore,
)
from adoption_engine.infrastructure.stubs.sponsor_presenter_stub import (
    SponsorPresenterStub,
)

__all__: list[str] = [
    "DonationTermBackendView",
    "InMemoryAdoptionBackend",
    "InMemoryKeyValueStore",
    "SponsorPresenterStub",
]
