"""Local pet store.

The client's read-mostly copy of pets. Favorite and status changes are
patched in place immediately (optimistic), while the listing order is
only recomputed by a debounced re-sort so that cards do not jump under
the user's finger during a burst of toggles.

Ordering: favorites first, then newest (highest pet id) first. The order
is a pure function of the snapshot taken at re-sort time.

A full fetch replaces the whole snapshot (reconciliation); favorite flags
then come from the backend's favorite list.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.application.services.debounce import Debouncer
from adoption_engine.domain.models.pet import Pet, PetStatus

ListingListener = Callable[[list[Pet]], None]


def listing_sort_key(pet: Pet) -> tuple[bool, int]:
    """Favorites first; ties broken by pet id descending."""
    return (not pet.is_favorite, -pet.id)


class LocalPetStore(LoggingMixin):
    """Cached pets plus the current listing order."""

    def __init__(self, resort_delay_seconds: float = 0.3) -> None:
        self._pets: dict[int, Pet] = {}
        self._order: list[int] = []
        self._listeners: list[ListingListener] = []
        self._resort = Debouncer(resort_delay_seconds, self.resort_now)
        self._init_logger(component="pet_store")

    def get(self, pet_id: int) -> Pet | None:
        return self._pets.get(pet_id)

    def __contains__(self, pet_id: object) -> bool:
        return pet_id in self._pets

    def __len__(self) -> int:
        return len(self._pets)

    def upsert(self, pet: Pet) -> None:
        """Insert or replace one pet, keeping its favorite flag when known."""
        current = self._pets.get(pet.id)
        if current is not None and current.is_favorite != pet.is_favorite:
            pet = pet.with_favorite(current.is_favorite)
        self._pets[pet.id] = pet
        if pet.id not in self._order:
            self._order.append(pet.id)

    def reconcile(self, pets: Iterable[Pet], favorite_ids: Iterable[int]) -> None:
        """Replace the snapshot with a full fetch and re-sort immediately.

        Args:
            pets: Every pet the backend returned for the view.
            favorite_ids: Pet ids the viewer has favorited.
        """
        favorites = set(favorite_ids)
        self._pets = {pet.id: pet.with_favorite(pet.id in favorites) for pet in pets}
        self._resort.cancel()
        self.resort_now()
        self._log_operation("reconcile").debug(
            "pet_store_reconciled", pet_count=len(self._pets), favorite_count=len(favorites)
        )

    def set_favorite(self, pet_id: int, is_favorite: bool) -> bool:
        """Patch a pet's favorite flag.

        Returns:
            The previous flag.

        Raises:
            KeyError: If the pet is not cached.
        """
        pet = self._pets[pet_id]
        self._pets[pet_id] = pet.with_favorite(is_favorite)
        return pet.is_favorite

    def restore_favorite(self, pet_id: int, is_favorite: bool) -> None:
        """Put back a flag after a failed toggle.

        A full fetch may have replaced the snapshot while the toggle was in
        flight; the fetched flag is authoritative then, so unknown pets are
        ignored.
        """
        pet = self._pets.get(pet_id)
        if pet is not None:
            self._pets[pet_id] = pet.with_favorite(is_favorite)

    def set_status(self, pet_id: int, status: PetStatus) -> None:
        """Patch a pet's status; unknown pets are ignored."""
        pet = self._pets.get(pet_id)
        if pet is not None:
            self._pets[pet_id] = pet.with_status(status)

    def listing(self) -> list[Pet]:
        """Pets in the current display order (last re-sort, new pets appended)."""
        return [self._pets[pet_id] for pet_id in self._order if pet_id in self._pets]

    def add_listener(self, listener: ListingListener) -> None:
        """Register a callback receiving the listing after each re-sort."""
        self._listeners.append(listener)

    def schedule_resort(self) -> None:
        """Re-sort after the debounce delay, coalescing bursts of calls."""
        self._resort.trigger()

    @property
    def resort_pending(self) -> bool:
        return self._resort.pending

    def flush_resort(self) -> None:
        self._resort.flush()

    def resort_now(self) -> None:
        """Recompute the listing order from the current snapshot."""
        ordered = sorted(self._pets.values(), key=listing_sort_key)
        self._order = [pet.id for pet in ordered]
        for listener in list(self._listeners):
            listener(ordered)
