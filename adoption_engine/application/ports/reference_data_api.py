"""Reference data API port (breed, status, age band, disease lookups)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adoption_engine.domain.models.reference_data import ReferenceItem, ReferenceKind


@runtime_checkable
class ReferenceDataApiProtocol(Protocol):
    """Protocol for lookup-table reads."""

    async def get_reference(
        self, kind: ReferenceKind, item_id: int
    ) -> ReferenceItem | None:
        """Fetch one lookup row by id, or None when unknown.

        Raises:
            RemoteCallError: On backend or transport failure.
        """
        ...
