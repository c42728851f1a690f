"""Unit tests for the term lifecycle transition function."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from adoption_engine.domain.errors.term import InvalidTermTransitionError
from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.email_delivery import (
    EmailDeliveryReport,
    RecipientStatus,
)
from adoption_engine.domain.models.party import PartyProfile, PartyRole
from adoption_engine.domain.models.remote_error import ClassifiedError, ErrorKind
from adoption_engine.domain.models.term_lifecycle import (
    DraftSubmitted,
    EmailFailed,
    EmailReported,
    EmailRequested,
    SubmitFailed,
    TermDraft,
    TermEffectKind,
    TermLoaded,
    TermMachine,
    TermMissing,
    TermSigned,
    TermState,
)
from adoption_engine.domain.services.term_transitions import advance

BOTH = (PartyRole.DONOR, PartyRole.ADOPTER)
ANA = PartyProfile(user_id=10, name="Ana", email="ana@example.org")
BRUNO = PartyProfile(user_id=20, name="Bruno Lima", email="bruno@example.org")


@pytest.fixture
def term() -> AdoptionTerm:
    return AdoptionTerm(
        id=7,
        pet_id=42,
        adopter_id=20,
        donor=ANA.snapshot(),
        adopter=BRUNO.snapshot(),
        signature="Bruno Lima",
        observations="Tenho quintal",
    )


def _loaded(term: AdoptionTerm, live: dict | None = None, hint: bool = False) -> TermLoaded:
    return TermLoaded(
        term=term,
        emailed_hint=hint,
        live=live if live is not None else {PartyRole.DONOR: ANA, PartyRole.ADOPTER: BRUNO},
        signer_name="Bruno Lima",
    )


def _report(donor: bool, adopter: bool, donor_address: str | None = "ana@example.org") -> EmailDeliveryReport:
    return EmailDeliveryReport(
        term_id=7,
        recipients=(
            RecipientStatus(PartyRole.DONOR, donor_address, donor),
            RecipientStatus(PartyRole.ADOPTER, "bruno@example.org", adopter),
        ),
        sent_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
    )


def _created(term: AdoptionTerm) -> TermMachine:
    return advance(TermMachine(), _loaded(term)).machine


class TestOpening:
    """Tests for loading or missing terms."""

    def test_missing_term_shows_form(self) -> None:
        draft = TermDraft(signature="Bruno Lima")
        transition = advance(TermMachine(), TermMissing(draft=draft))
        assert transition.machine.state == TermState.DRAFTING
        assert transition.machine.draft == draft
        assert transition.effect_kinds() == (TermEffectKind.SHOW_FORM,)

    def test_loaded_term_is_created(self, term: AdoptionTerm) -> None:
        transition = advance(TermMachine(), _loaded(term))
        assert transition.machine.state == TermState.CREATED
        assert transition.machine.term == term
        assert transition.effects == ()

    def test_emailed_term_or_hint(self, term: AdoptionTerm) -> None:
        emailed = replace(term, email_sent_at=datetime.now(timezone.utc))
        assert advance(TermMachine(), _loaded(emailed)).machine.state == TermState.EMAILED
        assert advance(TermMachine(), _loaded(term, hint=True)).machine.state == TermState.EMAILED

    def test_emailed_never_regresses_on_reload(self, term: AdoptionTerm) -> None:
        machine = advance(TermMachine(), _loaded(term, hint=True)).machine
        assert advance(machine, _loaded(term)).machine.state == TermState.EMAILED

    def test_stale_term_goes_to_drafting_update(self, term: AdoptionTerm) -> None:
        """A renamed party routes through STALE into a pre-filled re-signature form."""
        renamed = replace(BRUNO, name="Bruno Lima Souza")
        event = TermLoaded(
            term=term,
            emailed_hint=True,
            live={PartyRole.DONOR: ANA, PartyRole.ADOPTER: renamed},
            signer_name="Bruno Lima Souza",
        )
        transition = advance(TermMachine(), event)
        machine = transition.machine

        assert machine.state == TermState.DRAFTING
        assert machine.is_update is True
        assert machine.stale_roles == (PartyRole.ADOPTER,)
        assert machine.draft.signature == "Bruno Lima Souza"
        assert machine.draft.observations == "Tenho quintal"
        assert machine.draft.party_name(PartyRole.ADOPTER) == "Bruno Lima Souza"
        assert machine.draft.party_name(PartyRole.DONOR) == "Ana"
        assert machine.history[-2:] == (TermState.EMAILED, TermState.STALE)
        assert transition.effect_kinds() == (TermEffectKind.NOTIFY, TermEffectKind.SHOW_FORM)
        assert transition.effects[0].payload["roles"] == ("adopter",)


class TestSigning:
    """Tests for submissions."""

    def test_submit_emits_effect_and_blocks_double_submit(self) -> None:
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        transition = advance(drafting, DraftSubmitted(signature="Bruno Lima", observations=None))

        assert transition.machine.submitting is True
        assert transition.effects[0].kind == TermEffectKind.SUBMIT_TERM
        assert transition.effects[0].payload["update"] is False
        with pytest.raises(InvalidTermTransitionError):
            advance(transition.machine, DraftSubmitted(signature="Bruno Lima", observations=None))

    def test_signed_goes_to_created(self, term: AdoptionTerm) -> None:
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        transition = advance(drafting, TermSigned(term=term))
        assert transition.machine.state == TermState.CREATED
        assert transition.machine.submitting is False
        assert transition.effects[0].payload["reason"] == "term_signed"

    def test_existing_delivered_term_goes_to_emailed(self, term: AdoptionTerm) -> None:
        """A create answered by "already exists" keeps the known delivery status."""
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        transition = advance(
            drafting, TermSigned(term=term, already_existed=True, emailed_hint=True)
        )
        assert transition.machine.state == TermState.EMAILED
        assert transition.effects[0].payload["reason"] == "term_already_exists"

    def test_fresh_signature_ignores_hint(self, term: AdoptionTerm) -> None:
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        machine = advance(drafting, TermSigned(term=term, emailed_hint=True)).machine
        assert machine.state == TermState.CREATED

    def test_resigned_flag_after_update(self, term: AdoptionTerm) -> None:
        renamed = replace(BRUNO, name="Bruno L.")
        stale = advance(
            TermMachine(),
            _loaded(term, live={PartyRole.ADOPTER: renamed}, hint=True),
        ).machine
        machine = advance(stale, TermSigned(term=term)).machine
        assert machine.resigned is True
        assert machine.was_emailed is True

    def test_submit_failure_stays_drafting(self) -> None:
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        submitting = advance(drafting, DraftSubmitted(signature="Bruno", observations=None)).machine
        transition = advance(
            submitting, SubmitFailed(error=ClassifiedError(ErrorKind.TRANSIENT, "timeout"))
        )
        assert transition.machine.state == TermState.DRAFTING
        assert transition.machine.submitting is False
        assert transition.effects[0].payload == {"kind": "transient", "message": "timeout"}


class TestEmail:
    """Tests for email delivery transitions."""

    def test_full_delivery_reaches_emailed(self, term: AdoptionTerm) -> None:
        pending = advance(_created(term), EmailRequested()).machine
        assert pending.state == TermState.EMAIL_PENDING

        transition = advance(pending, EmailReported(report=_report(True, True), expected_roles=BOTH))
        assert transition.machine.state == TermState.EMAILED
        assert transition.machine.term.is_emailed
        assert transition.effect_kinds() == (
            TermEffectKind.RECORD_EMAILED,
            TermEffectKind.PRESENT_SPONSOR,
        )

    def test_partial_delivery_returns_to_created(self, term: AdoptionTerm) -> None:
        """Any unaccepted recipient keeps the term CREATED and names the address."""
        pending = advance(_created(term), EmailRequested()).machine
        transition = advance(
            pending, EmailReported(report=_report(False, True), expected_roles=BOTH)
        )
        assert transition.machine.state == TermState.CREATED
        assert transition.effects[0].kind == TermEffectKind.REPORT_ERROR
        assert transition.effects[0].payload["failed_recipients"] == (
            (PartyRole.DONOR, "ana@example.org"),
        )

    def test_partial_delivery_falls_back_to_snapshot_address(self, term: AdoptionTerm) -> None:
        pending = advance(_created(term), EmailRequested()).machine
        transition = advance(
            pending,
            EmailReported(
                report=_report(False, True, donor_address=None),
                expected_roles=BOTH,
                fallback_addresses={PartyRole.DONOR: "ana@example.org"},
            ),
        )
        assert transition.effects[0].payload["failed_recipients"] == (
            (PartyRole.DONOR, "ana@example.org"),
        )

    def test_email_failure_returns_to_created(self, term: AdoptionTerm) -> None:
        pending = advance(_created(term), EmailRequested()).machine
        machine = advance(
            pending, EmailFailed(error=ClassifiedError(ErrorKind.TRANSIENT, "timeout"))
        ).machine
        assert machine.state == TermState.CREATED

    def test_email_requires_created(self) -> None:
        drafting = advance(TermMachine(), TermMissing(draft=TermDraft(signature=""))).machine
        with pytest.raises(InvalidTermTransitionError) as exc_info:
            advance(drafting, EmailRequested())
        assert exc_info.value.from_state == TermState.DRAFTING
        assert exc_info.value.to_state == TermState.EMAIL_PENDING

    def test_unknown_event_rejected(self) -> None:
        with pytest.raises(TypeError):
            advance(TermMachine(), object())  # type: ignore[arg-type]


class TestTransitionMatrix:
    """Tests for TermMachine.move_to."""

    def test_emailed_only_goes_stale(self) -> None:
        assert TermState.EMAILED.valid_transitions() == frozenset({TermState.STALE})

    def test_illegal_move_raises(self) -> None:
        with pytest.raises(InvalidTermTransitionError) as exc_info:
            TermMachine().move_to(TermState.EMAIL_PENDING)
        assert TermState.DRAFTING in exc_info.value.allowed_transitions
        assert "NONE -> EMAIL_PENDING" in str(exc_info.value)
