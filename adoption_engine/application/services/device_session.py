"""Device session and saved filters.

Typed access to the device key/value store for the authenticated user:
last user id, auth token, cached profile and per-screen filter
selections. Session data is wiped when the backend reports the session
as expired; saved filters survive logout.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from adoption_engine.application.ports.key_value_store import KeyValueStoreProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.domain.models.party import PartyProfile

USER_ID_KEY = "@App:userId"
TOKEN_KEY = "@App:token"
USER_DATA_KEY = "@App:userData"
# Written by older client versions; cleared with the rest of the session.
LEGACY_USER_KEY = "@App:user"
FILTERS_KEY_PREFIX = "@App:filters:"

SESSION_KEYS: tuple[str, ...] = (TOKEN_KEY, LEGACY_USER_KEY, USER_DATA_KEY, USER_ID_KEY)


def filters_key(screen: str) -> str:
    """Device key holding the saved filters of one screen."""
    return f"{FILTERS_KEY_PREFIX}{screen}"


class DeviceSession(LoggingMixin):
    """Session state persisted on the device."""

    def __init__(self, store: KeyValueStoreProtocol) -> None:
        self._store = store
        self._init_logger(component="device_state")

    async def start(self, profile: PartyProfile, token: str) -> None:
        """Persist a freshly authenticated session.

        Args:
            profile: Profile of the logged-in user.
            token: Bearer token issued by the backend.
        """
        await self._store.set(USER_ID_KEY, profile.user_id)
        await self._store.set(TOKEN_KEY, token)
        await self._store.set(USER_DATA_KEY, asdict(profile))
        self._log_operation("start", user_id=profile.user_id).info("session_started")

    async def user_id(self) -> int | None:
        value = await self._store.get(USER_ID_KEY)
        return int(value) if value is not None else None

    async def token(self) -> str | None:
        return await self._store.get(TOKEN_KEY)

    async def profile(self) -> PartyProfile | None:
        """Cached profile of the logged-in user, if any."""
        data = await self._store.get(USER_DATA_KEY)
        if not data:
            return None
        return PartyProfile(**data)

    async def update_profile(self, profile: PartyProfile) -> None:
        """Refresh the cached profile after the user edits it."""
        await self._store.set(USER_DATA_KEY, asdict(profile))

    async def clear(self) -> None:
        """Forget the session (token, user and profile)."""
        await self._store.remove(*SESSION_KEYS)
        self._log_operation("clear").info("session_cleared")

    async def save_filters(self, screen: str, filters: dict[str, Any]) -> None:
        await self._store.set(filters_key(screen), filters)

    async def load_filters(self, screen: str) -> dict[str, Any]:
        """Saved filter selection of a screen (empty when none)."""
        return dict(await self._store.get(filters_key(screen)) or {})

    async def clear_filters(self, screen: str) -> None:
        await self._store.remove(filters_key(screen))
