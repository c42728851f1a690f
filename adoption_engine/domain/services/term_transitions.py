"""Pure transition function for the term lifecycle.

``advance`` never performs I/O. It validates the event against the
current state, returns the next immutable machine and lists the effects
the owning controller must execute (remote calls, cache writes, sponsor
presentation, notices). Controllers feed remote results back in as new
events.

Constraints:
- Illegal transitions raise InvalidTermTransitionError, never pass silently.
- A stale term always lands in DRAFTING with is_update=True.
- EMAILED is reached from EMAIL_PENDING only when every expected
  recipient was accepted.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

from adoption_engine.domain.errors.term import InvalidTermTransitionError
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.term_lifecycle import (
    DraftSubmitted,
    EmailFailed,
    EmailReported,
    EmailRequested,
    SubmitFailed,
    TermDraft,
    TermEffect,
    TermEffectKind,
    TermEvent,
    TermLoaded,
    TermMachine,
    TermMissing,
    TermSigned,
    TermState,
    TermTransition,
)


def advance(machine: TermMachine, event: TermEvent) -> TermTransition:
    """Apply an event to a term machine.

    Args:
        machine: Current machine.
        event: Event produced by a user action or a remote result.

    Returns:
        TermTransition with the next machine and the effects to run.

    Raises:
        InvalidTermTransitionError: If the event is not accepted in the
            current state.
    """
    if isinstance(event, TermMissing):
        return _on_missing(machine, event)
    if isinstance(event, TermLoaded):
        return _on_loaded(machine, event)
    if isinstance(event, DraftSubmitted):
        return _on_submitted(machine, event)
    if isinstance(event, TermSigned):
        return _on_signed(machine, event)
    if isinstance(event, SubmitFailed):
        return _on_submit_failed(machine, event)
    if isinstance(event, EmailRequested):
        return _on_email_requested(machine)
    if isinstance(event, EmailReported):
        return _on_email_reported(machine, event)
    if isinstance(event, EmailFailed):
        return _on_email_failed(machine, event)
    raise TypeError(f"Unsupported term event: {type(event).__name__}")


def _require(machine: TermMachine, expected: TermState, target: TermState) -> None:
    if machine.state != expected:
        raise InvalidTermTransitionError(
            from_state=machine.state,
            to_state=target,
            allowed_transitions=sorted(
                machine.state.valid_transitions(), key=lambda s: s.value
            ),
        )


def _on_missing(machine: TermMachine, event: TermMissing) -> TermTransition:
    next_machine = machine.move_to(
        TermState.DRAFTING,
        term=None,
        draft=event.draft,
        stale_roles=(),
        submitting=False,
    )
    return TermTransition(
        machine=next_machine,
        effects=(_show_form(event.draft),),
    )


def _on_loaded(machine: TermMachine, event: TermLoaded) -> TermTransition:
    term = event.term
    target = _delivered_state(machine, term, event.emailed_hint)
    loaded = machine.move_to(
        target, term=term, draft=None, stale_roles=(), submitting=False
    )

    stale = term.stale_parties(event.live)
    if not stale:
        return TermTransition(machine=loaded)

    draft = TermDraft(
        signature=event.signer_name,
        observations=term.observations,
        parties=_current_parties(term.snapshots(), event.live),
        is_update=True,
    )
    drafting = loaded.move_to(TermState.STALE, stale_roles=stale).move_to(
        TermState.DRAFTING, draft=draft
    )
    return TermTransition(
        machine=drafting,
        effects=(
            TermEffect(
                TermEffectKind.NOTIFY,
                {"reason": "term_stale", "roles": tuple(r.value for r in stale)},
            ),
            _show_form(draft),
        ),
    )


def _on_submitted(machine: TermMachine, event: DraftSubmitted) -> TermTransition:
    _require(machine, TermState.DRAFTING, TermState.CREATED)
    if machine.submitting:
        raise InvalidTermTransitionError(
            from_state=machine.state,
            to_state=TermState.CREATED,
            allowed_transitions=[],
        )
    base = machine.draft or TermDraft(signature=event.signature)
    draft = replace(base, signature=event.signature, observations=event.observations)
    return TermTransition(
        machine=machine.move_to(TermState.DRAFTING, draft=draft, submitting=True),
        effects=(
            TermEffect(
                TermEffectKind.SUBMIT_TERM,
                {
                    "signature": draft.signature,
                    "observations": draft.observations,
                    "update": draft.is_update,
                },
            ),
        ),
    )


def _on_signed(machine: TermMachine, event: TermSigned) -> TermTransition:
    _require(machine, TermState.DRAFTING, TermState.CREATED)
    # A fresh signature always needs an explicit send; an existing term keeps
    # whatever delivery status it already had.
    target = TermState.CREATED
    if event.already_existed and (event.term.is_emailed or event.emailed_hint):
        target = TermState.EMAILED
    reason = "term_already_exists" if event.already_existed else "term_signed"
    next_machine = machine.move_to(
        target,
        term=event.term,
        draft=None,
        stale_roles=(),
        submitting=False,
        resigned=machine.is_update,
    )
    return TermTransition(
        machine=next_machine,
        effects=(TermEffect(TermEffectKind.NOTIFY, {"reason": reason}),),
    )


def _on_submit_failed(machine: TermMachine, event: SubmitFailed) -> TermTransition:
    _require(machine, TermState.DRAFTING, TermState.CREATED)
    return TermTransition(
        machine=machine.move_to(TermState.DRAFTING, submitting=False),
        effects=(_report(event.error.kind.value, event.error.message),),
    )


def _on_email_requested(machine: TermMachine) -> TermTransition:
    _require(machine, TermState.CREATED, TermState.EMAIL_PENDING)
    return TermTransition(
        machine=machine.move_to(TermState.EMAIL_PENDING),
        effects=(TermEffect(TermEffectKind.SEND_EMAIL, {"term_id": machine.term.id}),),
    )


def _on_email_reported(machine: TermMachine, event: EmailReported) -> TermTransition:
    _require(machine, TermState.EMAIL_PENDING, TermState.EMAILED)
    report = event.report
    failed = report.failed_roles(event.expected_roles)
    if failed:
        recipients = tuple(
            (role, _address(report, role, event.fallback_addresses)) for role in failed
        )
        return TermTransition(
            machine=machine.move_to(TermState.CREATED),
            effects=(
                TermEffect(
                    TermEffectKind.REPORT_ERROR,
                    {"kind": "delivery", "failed_recipients": recipients},
                ),
            ),
        )

    sent_at = report.sent_at or datetime.now(timezone.utc)
    term = replace(machine.term, email_sent_at=sent_at)
    return TermTransition(
        machine=machine.move_to(TermState.EMAILED, term=term),
        effects=(
            TermEffect(TermEffectKind.RECORD_EMAILED, {"term_id": term.id}),
            TermEffect(TermEffectKind.PRESENT_SPONSOR),
        ),
    )


def _on_email_failed(machine: TermMachine, event: EmailFailed) -> TermTransition:
    _require(machine, TermState.EMAIL_PENDING, TermState.CREATED)
    return TermTransition(
        machine=machine.move_to(TermState.CREATED),
        effects=(_report(event.error.kind.value, event.error.message),),
    )


def _delivered_state(machine: TermMachine, term: Any, emailed_hint: bool) -> TermState:
    if term.is_emailed or emailed_hint:
        return TermState.EMAILED
    # EMAILED never regresses on refresh.
    if machine.state == TermState.EMAILED:
        return TermState.EMAILED
    return TermState.CREATED


def _current_parties(
    stored: Mapping[PartyRole, PartySnapshot],
    live: Mapping[PartyRole, PartyProfile | None],
) -> dict[PartyRole, PartySnapshot]:
    parties: dict[PartyRole, PartySnapshot] = {}
    for role, snapshot in stored.items():
        profile = live.get(role)
        parties[role] = profile.snapshot() if profile is not None else snapshot
    return parties


def _address(report: Any, role: PartyRole, fallback: Mapping[PartyRole, str | None]) -> str | None:
    status = report.recipient(role)
    if status is not None and status.address:
        return status.address
    return fallback.get(role)


def _show_form(draft: TermDraft) -> TermEffect:
    return TermEffect(
        TermEffectKind.SHOW_FORM,
        {"signature": draft.signature, "is_update": draft.is_update},
    )


def _report(kind: str, message: str) -> TermEffect:
    return TermEffect(TermEffectKind.REPORT_ERROR, {"kind": kind, "message": message})
