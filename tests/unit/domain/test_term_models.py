"""Unit tests for party snapshots, term staleness and delivery reports."""

from datetime import datetime, timezone

from adoption_engine.domain.models.adoption_term import AdoptionTerm
from adoption_engine.domain.models.donation_term import DonationTerm
from adoption_engine.domain.models.email_delivery import (
    EmailDeliveryReport,
    RecipientStatus,
)
from adoption_engine.domain.models.party import PartyProfile, PartyRole, PartySnapshot
from adoption_engine.domain.models.pet import Pet, PetStatus

ANA = PartySnapshot(name="Ana", email="ana@example.org", phone="(19) 99999-0000")
BRUNO = PartySnapshot(name="Bruno Lima", email="bruno@example.org")


def _term(**overrides: object) -> AdoptionTerm:
    values: dict = {
        "id": 1,
        "pet_id": 42,
        "adopter_id": 20,
        "donor": ANA,
        "adopter": BRUNO,
        "signature": "Bruno Lima",
    }
    values.update(overrides)
    return AdoptionTerm(**values)


class TestPartyProfile:
    """Tests for PartyProfile divergence."""

    def test_snapshot_copies_fields(self) -> None:
        profile = PartyProfile(user_id=10, name="Ana", email="ana@example.org", city="Campinas")
        assert profile.snapshot() == PartySnapshot(
            name="Ana", email="ana@example.org", city="Campinas"
        )

    def test_name_change_diverges(self) -> None:
        profile = PartyProfile(user_id=10, name="Ana Paula", email="ana@example.org")
        assert profile.diverges_from(ANA)

    def test_whitespace_and_email_case_ignored(self) -> None:
        profile = PartyProfile(
            user_id=10, name=" Ana ", email="ANA@example.org", phone="19999990000"
        )
        assert not profile.diverges_from(ANA)

    def test_location_change_does_not_diverge(self) -> None:
        """Only name and contact invalidate a signed term."""
        profile = PartyProfile(
            user_id=10,
            name="Ana",
            email="ana@example.org",
            phone="(19) 99999-0000",
            city="Recife",
            state="Pernambuco",
        )
        assert not profile.diverges_from(ANA)

    def test_missing_snapshot_fields_not_compared(self) -> None:
        profile = PartyProfile(user_id=20, name="Bruno Lima", email="bruno@example.org", phone="1")
        assert not profile.diverges_from(BRUNO)


class TestAdoptionTerm:
    """Tests for AdoptionTerm."""

    def test_key_and_emailed(self) -> None:
        term = _term()
        assert term.key == (42, 20)
        assert term.is_emailed is False
        assert _term(email_sent_at=datetime.now(timezone.utc)).is_emailed

    def test_stale_parties_in_role_order(self) -> None:
        live = {
            PartyRole.DONOR: PartyProfile(user_id=10, name="Ana Paula", email="ana@example.org"),
            PartyRole.ADOPTER: PartyProfile(user_id=20, name="Bruno", email="bruno@example.org"),
        }
        assert _term().stale_parties(live) == (PartyRole.DONOR, PartyRole.ADOPTER)

    def test_missing_profiles_are_not_stale(self) -> None:
        assert _term().stale_parties({PartyRole.DONOR: None}) == ()

    def test_backend_name_outdated_flag(self) -> None:
        """The backend hint marks the adopter stale when nothing diverges locally."""
        assert _term(name_outdated=True).stale_parties({}) == (PartyRole.ADOPTER,)


class TestDonationTerm:
    """Tests for DonationTerm."""

    def test_only_donor_is_checked(self) -> None:
        term = DonationTerm(id=3, donor_id=10, donor=ANA, motive="Mudança", signature="Ana")
        live = {PartyRole.DONOR: PartyProfile(user_id=10, name="Ana", email="ana@novo.org")}
        assert term.key == 10
        assert term.stale_parties(live) == (PartyRole.DONOR,)


class TestEmailDeliveryReport:
    """Tests for per-recipient delivery reports."""

    def test_complete_when_every_expected_role_accepted(self) -> None:
        report = EmailDeliveryReport(
            term_id=1,
            recipients=(
                RecipientStatus(PartyRole.DONOR, "ana@example.org", True),
                RecipientStatus(PartyRole.ADOPTER, "bruno@example.org", True),
            ),
        )
        assert report.is_complete((PartyRole.DONOR, PartyRole.ADOPTER))

    def test_unreported_role_counts_as_failed(self) -> None:
        report = EmailDeliveryReport(
            term_id=1,
            recipients=(RecipientStatus(PartyRole.ADOPTER, "bruno@example.org", True),),
        )
        assert report.failed_roles((PartyRole.DONOR, PartyRole.ADOPTER)) == (PartyRole.DONOR,)
        assert report.recipient(PartyRole.DONOR) is None


class TestPet:
    """Tests for the Pet model."""

    def test_unknown_status_code(self) -> None:
        assert Pet(id=1, owner_id=10, status_code=7).status is None
        assert PetStatus.from_code(None) is None

    def test_copies_keep_identity(self) -> None:
        pet = Pet(id=1, owner_id=10, status_code=2)
        assert pet.with_favorite(True).is_favorite
        assert pet.with_status(PetStatus.ADOPTED).status == PetStatus.ADOPTED
        assert pet.is_favorite is False
