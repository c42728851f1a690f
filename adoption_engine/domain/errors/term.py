"""Term lifecycle errors.

Errors raised by the term state machine and the term controllers:
illegal transitions, overlapping operations on the same term, terminal
business refusals and delivery failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from adoption_engine.domain.exceptions import AdoptionEngineError

if TYPE_CHECKING:
    from adoption_engine.domain.models.party import PartyRole
    from adoption_engine.domain.models.term_lifecycle import TermState


class InvalidTermTransitionError(AdoptionEngineError):
    """Raised when a term transition is not in the transition matrix.

    Attributes:
        from_state: Current state.
        to_state: Attempted target state.
        allowed_transitions: Valid target states from the current state.
    """

    def __init__(
        self,
        from_state: TermState,
        to_state: TermState,
        allowed_transitions: list[TermState] | None = None,
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.allowed_transitions = allowed_transitions or []

        allowed_str = (
            f" Valid transitions: {[s.value for s in self.allowed_transitions]}"
            if self.allowed_transitions
            else ""
        )
        super().__init__(
            f"Invalid term transition: {from_state.value} -> {to_state.value}.{allowed_str}"
        )


class TermOperationInProgressError(AdoptionEngineError):
    """Raised when a second operation targets a term that is already busy.

    Attributes:
        term_key: Key of the busy term, (pet_id, adopter_id) or donor id.
        operation: Operation that was rejected.
    """

    def __init__(self, term_key: object, operation: str) -> None:
        self.term_key = term_key
        self.operation = operation
        super().__init__(
            f"Another operation is in progress for term {term_key!r}; "
            f"{operation} rejected. Please wait."
        )


class SelfAdoptionError(AdoptionEngineError):
    """Raised when the backend refuses a term because the adopter owns the pet.

    Terminal: the flow cannot continue for this pet.
    """

    def __init__(self, pet_id: int, user_id: int, message: str = "") -> None:
        self.pet_id = pet_id
        self.user_id = user_id
        super().__init__(message or f"User {user_id} cannot adopt own pet {pet_id}")


class TermServiceUnavailableError(AdoptionEngineError):
    """Raised when a term call failed for a retryable reason.

    The controller stays in its previous state; the user may retry.

    Attributes:
        operation: Failed operation name.
        detail: Raw backend or transport message.
    """

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Term service unavailable during {operation}{suffix}")


class TermDeliveryError(AdoptionEngineError):
    """Raised when a term email did not reach every recipient.

    The term remains CREATED and the send may be retried without
    re-creating the term.

    Attributes:
        term_id: Term whose email failed.
        failed_recipients: (role, address) pairs that were not accepted.
    """

    def __init__(
        self,
        term_id: int,
        failed_recipients: tuple[tuple[PartyRole, str | None], ...],
        detail: str = "",
    ) -> None:
        self.term_id = term_id
        self.failed_recipients = failed_recipients
        self.detail = detail
        names = ", ".join(
            f"{role.value} <{address or 'unknown address'}>"
            for role, address in failed_recipients
        )
        suffix = f" ({detail})" if detail else ""
        super().__init__(f"Term {term_id} email not delivered to: {names}{suffix}")

    @property
    def failed_roles(self) -> tuple[PartyRole, ...]:
        return tuple(role for role, _ in self.failed_recipients)


class DonationTermRequiredError(AdoptionEngineError):
    """Raised when a donor tries to list pets without a delivered donation term."""

    def __init__(self, donor_id: int) -> None:
        self.donor_id = donor_id
        super().__init__(
            f"User {donor_id} must sign and send the donation term before listing pets"
        )


class CommunicationLockedError(AdoptionEngineError):
    """Raised when messaging is requested before the adoption term was emailed.

    Attributes:
        pet_id: Pet being discussed.
        adopter_id: Prospective adopter.
        state: Term state at the time of the request.
    """

    def __init__(self, pet_id: int, adopter_id: int, state: TermState) -> None:
        self.pet_id = pet_id
        self.adopter_id = adopter_id
        self.state = state
        super().__init__(
            f"Communication for pet {pet_id} is locked until the adoption term "
            f"is emailed (current state: {state.value})"
        )


class TermControllerClosedError(AdoptionEngineError):
    """Raised when an operation is started on a closed term controller."""

    def __init__(self, term_key: object, operation: str) -> None:
        self.term_key = term_key
        self.operation = operation
        super().__init__(f"Term controller for {term_key!r} is closed; {operation} rejected")
