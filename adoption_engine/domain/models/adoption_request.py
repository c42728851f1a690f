"""Adoption request outcomes.

An adoption request adds a pet to the user's "my pets" list. The backend
answers with success, a duplicate, a self-adoption refusal or a history
block; each maps to one AdoptionOutcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from adoption_engine.domain.models.remote_error import ErrorKind


class AdoptionOutcome(Enum):
    """Result of an adoption request.

    Outcomes:
        ADDED: Association created.
        ALREADY_ADDED: Association already existed (idempotent success).
        READOPTION_OFFERED: User previously had this pet; confirmation needed.
        BLOCKED: Not allowed (own pet, not requestable, forbidden).
        RETRYABLE: Transient or unrecognized failure; the user may retry.
    """

    ADDED = "added"
    ALREADY_ADDED = "already_added"
    READOPTION_OFFERED = "readoption_offered"
    BLOCKED = "blocked"
    RETRYABLE = "retryable"

    @property
    def is_success(self) -> bool:
        return self in (AdoptionOutcome.ADDED, AdoptionOutcome.ALREADY_ADDED)


@dataclass(frozen=True)
class AdoptionRequestResult:
    """Outcome of request_adopt / confirm_readoption.

    Attributes:
        pet_id: Requested pet.
        user_id: Requesting user.
        outcome: Mapped outcome.
        message: Backend message for non-success outcomes (raw).
        error_kind: Classified kind when the backend refused.
    """

    pet_id: int
    user_id: int
    outcome: AdoptionOutcome
    message: str = ""
    error_kind: ErrorKind | None = None


@dataclass(frozen=True)
class HandoffResult:
    """Outcome of completing an adoption and opening messaging.

    Attributes:
        pet_id: Adopted pet.
        adopter_id: Adopting user.
        status_updated: Whether the backend accepted the ADOPTED status.
        status_error: Raw failure message when the status write failed.
        messaging_opened: Whether the messaging hand-off ran.
    """

    pet_id: int
    adopter_id: int
    status_updated: bool
    status_error: str | None = None
    messaging_opened: bool = False
