"""Local term cache.

Persisted set of pet ids, per viewer, whose adoption term email was
sent successfully from this device. It is a hint only: controllers
still revalidate against the backend, and the cache only ever grows
(writes are set unions, so concurrent writers cannot lose entries).
"""

from __future__ import annotations

from adoption_engine.application.ports.key_value_store import KeyValueStoreProtocol
from adoption_engine.application.services.base import LoggingMixin

EMAILED_TERMS_KEY_PREFIX = "@App:emailedTerms:"


def emailed_terms_key(user_id: int) -> str:
    return f"{EMAILED_TERMS_KEY_PREFIX}{user_id}"


class LocalTermCache(LoggingMixin):
    """Device-persisted "term emailed" markers."""

    def __init__(self, store: KeyValueStoreProtocol) -> None:
        self._store = store
        self._init_logger(component="term_cache")

    async def pet_ids(self, user_id: int) -> frozenset[int]:
        """Pets whose term this viewer has seen emailed."""
        values = await self._store.get(emailed_terms_key(user_id)) or []
        return frozenset(int(value) for value in values)

    async def contains(self, user_id: int, pet_id: int) -> bool:
        return pet_id in await self.pet_ids(user_id)

    async def record(self, user_id: int, pet_id: int) -> None:
        """Mark a pet's term as emailed for this viewer."""
        stored = await self._store.union(emailed_terms_key(user_id), [pet_id])
        self._log_operation("record", user_id=user_id, pet_id=pet_id).info(
            "term_email_recorded", cached_count=len(stored)
        )
