"""Domain errors for the adoption engine.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from AdoptionEngineError.
"""

from adoption_engine.domain.errors.term import (
    CommunicationLockedError,
    DonationTermRequiredError,
    InvalidTermTransitionError,
    SelfAdoptionError,
    TermControllerClosedError,
    TermDeliveryError,
    TermOperationInProgressError,
    TermServiceUnavailableError,
)
from adoption_engine.domain.errors.favorite import (
    ActionNotPermittedError,
    FavoriteToggleError,
    PetNotFoundError,
)
from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.session import SessionExpiredError
from adoption_engine.domain.errors.validation import TermValidationError

__all__: list[str] = [
    "ActionNotPermittedError",
    "CommunicationLockedError",
    "DonationTermRequiredError",
    "FavoriteToggleError",
    "InvalidTermTransitionError",
    "PetNotFoundError",
    "RemoteCallError",
    "SelfAdoptionError",
    "SessionExpiredError",
    "TermControllerClosedError",
    "TermDeliveryError",
    "TermOperationInProgressError",
    "TermServiceUnavailableError",
    "TermValidationError",
]
