"""Term lifecycle state machine model.

Shared by adoption terms (keyed by pet and adopter) and donation terms
(keyed by donor). Transitions are computed by
``adoption_engine.domain.services.term_transitions.advance`` which
returns the next machine plus the side effects a controller must run.

State Machine:
    NONE -> DRAFTING        no term exists, form shown
    NONE -> CREATED         existing term loaded
    NONE -> EMAILED         existing, already delivered term loaded
    DRAFTING -> CREATED     create/update accepted (or already existed)
    DRAFTING -> EMAILED     already existed and was delivered
    CREATED -> EMAIL_PENDING  explicit send requested
    CREATED -> EMAILED      refresh finds the term delivered elsewhere
    CREATED -> STALE        party data diverged from the snapshot
    EMAIL_PENDING -> EMAILED  every recipient accepted
    EMAIL_PENDING -> CREATED  partial or total delivery failure
    EMAILED -> STALE        party data diverged from the snapshot
    STALE -> DRAFTING       re-signature with update=True
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Protocol

from adoption_engine.domain.models.email_delivery import EmailDeliveryReport
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.remote_error import ClassifiedError


class TermRecord(Protocol):
    """Shape shared by AdoptionTerm and DonationTerm."""

    id: int
    signature: str
    observations: str | None
    email_sent_at: datetime | None

    @property
    def is_emailed(self) -> bool: ...

    def snapshots(self) -> dict[PartyRole, PartySnapshot]: ...

    def stale_parties(
        self, live: Mapping[PartyRole, PartyProfile | None]
    ) -> tuple[PartyRole, ...]: ...


class TermState(Enum):
    """Lifecycle state of a term as seen by one controller."""

    NONE = "NONE"
    DRAFTING = "DRAFTING"
    CREATED = "CREATED"
    EMAIL_PENDING = "EMAIL_PENDING"
    EMAILED = "EMAILED"
    STALE = "STALE"

    def valid_transitions(self) -> frozenset[TermState]:
        """States reachable from this one."""
        return TERM_TRANSITION_MATRIX.get(self, frozenset())


TERM_TRANSITION_MATRIX: dict[TermState, frozenset[TermState]] = {
    TermState.NONE: frozenset({TermState.DRAFTING, TermState.CREATED, TermState.EMAILED}),
    TermState.DRAFTING: frozenset({TermState.CREATED, TermState.EMAILED}),
    TermState.CREATED: frozenset(
        {TermState.EMAIL_PENDING, TermState.EMAILED, TermState.STALE}
    ),
    TermState.EMAIL_PENDING: frozenset({TermState.EMAILED, TermState.CREATED}),
    TermState.EMAILED: frozenset({TermState.STALE}),
    TermState.STALE: frozenset({TermState.DRAFTING}),
}


class TermEffectKind(Enum):
    """Side effects a controller executes after a transition."""

    SHOW_FORM = "show_form"
    SUBMIT_TERM = "submit_term"
    SEND_EMAIL = "send_email"
    RECORD_EMAILED = "record_emailed"
    PRESENT_SPONSOR = "present_sponsor"
    NOTIFY = "notify"
    REPORT_ERROR = "report_error"


@dataclass(frozen=True)
class TermEffect:
    """One side effect with its payload."""

    kind: TermEffectKind
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TermDraft:
    """Form contents while (re-)signing a term.

    Attributes:
        signature: Pre-filled signature, the signer's current name.
        observations: Observations carried over from an existing term.
        parties: Current party data shown on the form.
        is_update: True when re-signing a stale term.
    """

    signature: str
    observations: str | None = None
    parties: Mapping[PartyRole, PartySnapshot] = field(default_factory=dict)
    is_update: bool = False

    def party_name(self, role: PartyRole) -> str | None:
        snapshot = self.parties.get(role)
        return snapshot.name if snapshot is not None else None


@dataclass(frozen=True)
class TermMachine:
    """Immutable snapshot of a term lifecycle.

    Attributes:
        state: Current state.
        term: Last term record loaded from the backend.
        draft: Form contents while NONE/DRAFTING.
        stale_roles: Parties whose data diverged, when re-signing.
        submitting: A create/update call is in flight.
        resigned: The current term came from an update (re-signature).
        history: States visited, oldest first (current excluded).
    """

    state: TermState = TermState.NONE
    term: Any = None
    draft: TermDraft | None = None
    stale_roles: tuple[PartyRole, ...] = ()
    submitting: bool = False
    resigned: bool = False
    history: tuple[TermState, ...] = ()

    @property
    def is_update(self) -> bool:
        return self.draft is not None and self.draft.is_update

    @property
    def was_emailed(self) -> bool:
        """Whether this lifecycle has reached EMAILED at some point."""
        return self.state == TermState.EMAILED or TermState.EMAILED in self.history

    def move_to(self, new_state: TermState, **changes: Any) -> TermMachine:
        """Return a machine in ``new_state`` with the given field changes.

        Staying in the same state only applies the changes.

        Raises:
            InvalidTermTransitionError: If the transition is not in the matrix.
        """
        # Import here to avoid circular dependency
        from adoption_engine.domain.errors.term import InvalidTermTransitionError

        if new_state == self.state:
            return replace(self, **changes)
        allowed = self.state.valid_transitions()
        if new_state not in allowed:
            raise InvalidTermTransitionError(
                from_state=self.state,
                to_state=new_state,
                allowed_transitions=sorted(allowed, key=lambda s: s.value),
            )
        return replace(
            self,
            state=new_state,
            history=self.history + (self.state,),
            **changes,
        )


# Events fed to advance(). Each is produced by the controller from user
# actions or remote results.


@dataclass(frozen=True)
class TermMissing:
    """Backend has no term; show the creation form."""

    draft: TermDraft


@dataclass(frozen=True)
class TermLoaded:
    """A term was fetched for display.

    Attributes:
        term: Fetched record.
        emailed_hint: Local term cache says the email was already sent.
        live: Current profiles by role, for the staleness check.
        signer_name: Current name of the acting signer.
    """

    term: Any
    emailed_hint: bool
    live: Mapping[PartyRole, PartyProfile | None]
    signer_name: str


@dataclass(frozen=True)
class DraftSubmitted:
    """User submitted the form."""

    signature: str
    observations: str | None = None


@dataclass(frozen=True)
class TermSigned:
    """Create/update accepted, or the term already existed.

    Attributes:
        term: Record re-fetched after the call.
        already_existed: Backend reported an existing term (informational).
        emailed_hint: Local term cache says the email was already sent.
    """

    term: Any
    already_existed: bool = False
    emailed_hint: bool = False


@dataclass(frozen=True)
class SubmitFailed:
    """Create/update failed with a recoverable error."""

    error: ClassifiedError


@dataclass(frozen=True)
class EmailRequested:
    """User asked to send the term by email."""


@dataclass(frozen=True)
class EmailReported:
    """Backend answered the email send.

    Attributes:
        report: Per-recipient outcome.
        expected_roles: Roles that must all be accepted.
        fallback_addresses: Addresses from the term snapshot, used when the
            report omits a failing recipient's address.
    """

    report: EmailDeliveryReport
    expected_roles: tuple[PartyRole, ...]
    fallback_addresses: Mapping[PartyRole, str | None] = field(default_factory=dict)


@dataclass(frozen=True)
class EmailFailed:
    """Email send call failed outright."""

    error: ClassifiedError


TermEvent = (
    TermMissing
    | TermLoaded
    | DraftSubmitted
    | TermSigned
    | SubmitFailed
    | EmailRequested
    | EmailReported
    | EmailFailed
)


@dataclass(frozen=True)
class TermTransition:
    """Result of advancing a machine: next machine plus effects to run."""

    machine: TermMachine
    effects: tuple[TermEffect, ...] = ()

    def effect_kinds(self) -> tuple[TermEffectKind, ...]:
        return tuple(effect.kind for effect in self.effects)
