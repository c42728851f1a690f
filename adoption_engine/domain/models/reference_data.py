"""Reference data (breeds, statuses, age bands, diseases)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ReferenceKind(str, Enum):
    """Kinds of backend lookup tables."""

    BREED = "breed"
    STATUS = "status"
    AGE_BAND = "age_band"
    DISEASE = "disease"


@dataclass(frozen=True)
class ReferenceItem:
    """One row of a lookup table."""

    kind: ReferenceKind
    id: int
    name: str
