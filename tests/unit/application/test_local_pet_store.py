"""Unit tests for LocalPetStore ordering and debounced re-sort."""

import asyncio

import pytest

from adoption_engine.application.services.local_pet_store import (
    LocalPetStore,
    listing_sort_key,
)
from adoption_engine.domain.models.pet import Pet, PetStatus


def _pet(pet_id: int, favorite: bool = False) -> Pet:
    return Pet(id=pet_id, owner_id=10, status_code=2, is_favorite=favorite)


@pytest.fixture
def store() -> LocalPetStore:
    store = LocalPetStore(resort_delay_seconds=0.01)
    store.reconcile([_pet(1), _pet(2), _pet(3)], favorite_ids=[1])
    return store


def _ids(store: LocalPetStore) -> list[int]:
    return [pet.id for pet in store.listing()]


class TestOrdering:
    """Tests for the listing order."""

    def test_favorites_first_then_newest(self, store: LocalPetStore) -> None:
        assert _ids(store) == [1, 3, 2]

    def test_sort_key_is_pure(self) -> None:
        pets = [_pet(5), _pet(9, favorite=True), _pet(7)]
        assert [p.id for p in sorted(pets, key=listing_sort_key)] == [9, 7, 5]

    def test_reconcile_takes_favorites_from_backend(self, store: LocalPetStore) -> None:
        """A full fetch replaces local flags with the backend favorite list."""
        store.set_favorite(2, True)
        store.reconcile([_pet(1), _pet(2), _pet(3)], favorite_ids=[3])
        assert _ids(store) == [3, 2, 1]
        assert store.get(2).is_favorite is False


class TestOptimisticPatches:
    """Tests for in-place favorite and status patches."""

    def test_set_favorite_returns_previous_and_keeps_order(self, store: LocalPetStore) -> None:
        """Patching a flag does not move the card until the re-sort runs."""
        assert store.set_favorite(2, True) is False
        assert store.get(2).is_favorite is True
        assert _ids(store) == [1, 3, 2]

    def test_set_favorite_unknown_pet(self, store: LocalPetStore) -> None:
        with pytest.raises(KeyError):
            store.set_favorite(99, True)

    def test_restore_favorite_ignores_unknown_pet(self, store: LocalPetStore) -> None:
        store.set_favorite(2, True)
        store.restore_favorite(2, False)
        store.restore_favorite(99, True)
        assert store.get(2).is_favorite is False
        assert 99 not in store

    def test_set_status(self, store: LocalPetStore) -> None:
        store.set_status(3, PetStatus.ADOPTED)
        store.set_status(99, PetStatus.ADOPTED)
        assert store.get(3).status == PetStatus.ADOPTED
        assert 99 not in store

    def test_upsert_keeps_known_favorite(self, store: LocalPetStore) -> None:
        store.upsert(Pet(id=1, owner_id=10, status_code=3, is_favorite=False))
        store.upsert(_pet(4))
        assert store.get(1).is_favorite is True
        assert store.get(1).status == PetStatus.PENDING
        assert _ids(store)[-1] == 4
        assert len(store) == 4


class TestDebouncedResort:
    """Tests for the coalesced re-sort."""

    @pytest.mark.asyncio
    async def test_burst_of_toggles_resorts_once(self, store: LocalPetStore) -> None:
        listings: list[list[int]] = []
        store.add_listener(lambda pets: listings.append([p.id for p in pets]))

        store.set_favorite(2, True)
        store.schedule_resort()
        store.set_favorite(3, True)
        store.schedule_resort()
        assert store.resort_pending

        await asyncio.sleep(0.05)

        assert listings == [[3, 2, 1]]
        assert not store.resort_pending

    def test_flush_resort(self, store: LocalPetStore) -> None:
        store.set_favorite(1, False)
        store.flush_resort()
        assert _ids(store) == [1, 3, 2]
        store.resort_now()
        assert _ids(store) == [3, 2, 1]
