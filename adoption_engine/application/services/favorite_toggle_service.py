"""Favorite toggle coordinator.

Flips a pet's favorite flag optimistically, then confirms it with the
backend.

Constraints:
- One toggle per pet at a time: a re-entrant toggle on the same pet is a
  no-op reporting BUSY; other pets proceed independently.
- The pet status guard is consulted before any state change.
- On failure the exact previous flag is restored before the error
  propagates.
- The backend answering "already favorited" (add) or "not found"
  (remove) means the desired state already holds and counts as success.
- Listing order is re-sorted only after a debounce delay.
"""

from __future__ import annotations

import asyncio

import structlog

from adoption_engine.application.ports.favorite_api import FavoriteApiProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.application.services.device_session import DeviceSession
from adoption_engine.application.services.keyed_lock import KeyedLock
from adoption_engine.application.services.pet_catalog_service import PetCatalogService
from adoption_engine.domain.errors.favorite import (
    ActionNotPermittedError,
    FavoriteToggleError,
)
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.session import SessionExpiredError
from adoption_engine.domain.models.favorite import ToggleResult, ToggleStatus
from adoption_engine.domain.models.remote_error import ErrorKind
from adoption_engine.domain.services.pet_status_guard import permitted_actions
from adoption_engine.infrastructure.observability.correlation import correlation_scope


class FavoriteToggleService(LoggingMixin):
    """Coordinates optimistic favorite toggles."""

    def __init__(
        self,
        favorite_api: FavoriteApiProtocol,
        catalog: PetCatalogService,
        session: DeviceSession,
        locks: KeyedLock | None = None,
    ) -> None:
        self._api = favorite_api
        self._catalog = catalog
        self._session = session
        self._locks = locks or KeyedLock()
        self._init_logger(component="favorites")

    def is_busy(self, pet_id: int) -> bool:
        """Whether a toggle for the pet is in flight (UI shows "please wait")."""
        return self._locks.is_held(("favorite", pet_id))

    async def toggle(self, pet_id: int) -> ToggleResult:
        """Toggle the viewer's favorite flag on a pet.

        Args:
            pet_id: Pet to toggle.

        Returns:
            ToggleResult, APPLIED with the new flag, or BUSY when a toggle
            for the same pet is already in flight.

        Raises:
            ActionNotPermittedError: If the guard forbids favoriting.
            FavoriteToggleError: If the backend call failed (rolled back).
            SessionExpiredError: If the session expired (rolled back).
        """
        with correlation_scope():
            log = self._log_operation("toggle", pet_id=pet_id)
            with self._locks.holding(("favorite", pet_id)) as acquired:
                if not acquired:
                    cached = self._catalog.store.get(pet_id)
                    log.info("favorite_toggle_busy")
                    return ToggleResult(
                        pet_id=pet_id,
                        status=ToggleStatus.BUSY,
                        is_favorite=cached.is_favorite if cached else False,
                    )
                return await self._toggle_locked(pet_id, log)

    async def _toggle_locked(
        self, pet_id: int, log: structlog.BoundLogger
    ) -> ToggleResult:
        viewer_id = await self._session.user_id()
        pet = await self._catalog.get_pet(pet_id)
        if not permitted_actions(pet, viewer_id).can_favorite or viewer_id is None:
            raise ActionNotPermittedError(pet_id, "favorite")

        store = self._catalog.store
        desired = not pet.is_favorite
        previous = store.set_favorite(pet_id, desired)
        log = log.bind(user_id=viewer_id, desired=desired)

        try:
            if desired:
                await self._api.add_favorite(viewer_id, pet_id)
            else:
                await self._api.remove_favorite(viewer_id, pet_id)
        except RemoteCallError as exc:
            if _already_in_desired_state(desired, exc.kind):
                log.info("favorite_already_in_desired_state", kind=exc.kind.value)
            else:
                store.restore_favorite(pet_id, previous)
                log.warning(
                    "favorite_toggle_rolled_back",
                    kind=exc.kind.value,
                    error=exc.message,
                )
                if exc.kind == ErrorKind.SESSION_EXPIRED:
                    raise SessionExpiredError("toggle_favorite", exc.message) from exc
                raise FavoriteToggleError(pet_id, previous, exc.message) from exc
        except asyncio.CancelledError:
            store.restore_favorite(pet_id, previous)
            log.info("favorite_toggle_cancelled")
            raise

        store.schedule_resort()
        log.info("favorite_toggled")
        return ToggleResult(pet_id=pet_id, status=ToggleStatus.APPLIED, is_favorite=desired)


def _already_in_desired_state(desired: bool, kind: ErrorKind) -> bool:
    if desired:
        return kind == ErrorKind.ALREADY_EXISTS
    return kind == ErrorKind.NOT_FOUND
