"""HTTP adapter for the adoption backend (httpx + pydantic schemas)."""

from adoption_engine.infrastructure.adapters.http.adoption_api_client import (
    AdoptionApiClient,
    DonationTermApiClient,
)

__all__: list[str] = ["AdoptionApiClient", "DonationTermApiClient"]
