"""Reference data resolver.

Memoizes lookup-table rows (breed, status, age band, disease) for the
lifetime of the service. Unknown ids are memoized too; failures are not,
so a later call retries.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from adoption_engine.application.ports.reference_data_api import ReferenceDataApiProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.domain.models.pet import Pet
from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind


@dataclass(frozen=True)
class PetDescription:
    """Display names resolved for a pet's reference ids."""

    pet_id: int
    breed: str | None
    status: str | None
    age_band: str | None
    diseases: tuple[str, ...]


class ReferenceDataService(LoggingMixin):
    """Memoized reference data lookups."""

    def __init__(self, api: ReferenceDataApiProtocol) -> None:
        self._api = api
        self._cache: dict[tuple[ReferenceKind, int], ReferenceItem | None] = {}
        self._init_logger(component="reference_data")

    async def resolve(self, kind: ReferenceKind, item_id: int | None) -> ReferenceItem | None:
        """Look up one row, hitting the backend at most once per id."""
        if item_id is None:
            return None
        key = (kind, item_id)
        if key in self._cache:
            return self._cache[key]
        item = await self._api.get_reference(kind, item_id)
        if item is None:
            self._log_operation("resolve", kind=kind.value, item_id=item_id).info(
                "reference_item_unknown"
            )
        self._cache[key] = item
        return item

    async def describe_pet(self, pet: Pet) -> PetDescription:
        """Resolve every reference id of a pet concurrently."""
        breed, status, age_band, *diseases = await asyncio.gather(
            self.resolve(ReferenceKind.BREED, pet.breed_id),
            self.resolve(ReferenceKind.STATUS, pet.status_code),
            self.resolve(ReferenceKind.AGE_BAND, pet.age_band_id),
            *(self.resolve(ReferenceKind.DISEASE, d) for d in pet.disease_ids),
        )
        return PetDescription(
            pet_id=pet.id,
            breed=_name(breed),
            status=_name(status),
            age_band=_name(age_band),
            diseases=tuple(item.name for item in diseases if item is not None),
        )

    def cached_count(self) -> int:
        return len(self._cache)


def _name(item: ReferenceItem | None) -> str | None:
    return item.name if item is not None else None
