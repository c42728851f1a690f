"""Unit tests for DonationTermController."""

import pytest

from adoption_engine.application.services.donation_term_controller import (
    DonationTermController,
)
from adoption_engine.bootstrap.container import AdoptionEngine
from adoption_engine.domain.errors.term import DonationTermRequiredError, TermDeliveryError
from adoption_engine.domain.errors.validation import TermValidationError
from adoption_engine.domain.models.donation_term import ALL_COMMITMENTS, DonationCommitment
from adoption_engine.domain.models.party import PartyRole
from adoption_engine.domain.models.term_lifecycle import TermState
from adoption_engine.infrastructure.stubs.adoption_backend_stub import (
    InMemoryAdoptionBackend,
)
from adoption_engine.infrastructure.stubs.sponsor_presenter_stub import (
    SponsorPresenterStub,
)


@pytest.fixture
def controller(engine: AdoptionEngine) -> DonationTermController:
    return engine.terms.for_donation(10)


async def _sign(controller: DonationTermController) -> None:
    await controller.submit(
        motive="Mudança de cidade",
        signature="Ana",
        commitments=ALL_COMMITMENTS,
        adoption_conditions="Casa com quintal",
    )


class TestValidation:
    """Tests for local form validation."""

    @pytest.mark.asyncio
    async def test_missing_motive_and_commitment(
        self, controller: DonationTermController, backend: InMemoryAdoptionBackend
    ) -> None:
        await controller.open()
        with pytest.raises(TermValidationError) as exc_info:
            await controller.submit(
                motive=" ",
                signature="Ana",
                commitments=ALL_COMMITMENTS - {DonationCommitment.KEEPS_CONTACT},
            )
        assert exc_info.value.missing_fields == ["motive", "compromesteContato"]
        assert backend.calls["create_donation_term"] == 0

    @pytest.mark.asyncio
    async def test_all_commitments_required(self, controller: DonationTermController) -> None:
        await controller.open()
        with pytest.raises(TermValidationError) as exc_info:
            await controller.submit(motive="Mudança", signature="", commitments=[])
        assert exc_info.value.missing_fields[0] == "signature"
        assert len(exc_info.value.missing_fields) == 1 + len(ALL_COMMITMENTS)


class TestLifecycle:
    """Tests for sign, send and the listing gate."""

    @pytest.mark.asyncio
    async def test_open_prefills_donor_name(self, controller: DonationTermController) -> None:
        machine = await controller.open()
        assert machine.state == TermState.DRAFTING
        assert controller.draft.signature == "Ana"

    @pytest.mark.asyncio
    async def test_sign_and_send_unlocks_listing(
        self,
        controller: DonationTermController,
        backend: InMemoryAdoptionBackend,
        presenter: SponsorPresenterStub,
    ) -> None:
        await controller.open()
        await _sign(controller)
        assert controller.state == TermState.CREATED
        with pytest.raises(DonationTermRequiredError):
            controller.ensure_can_list_pets()

        await controller.send_email()

        assert controller.state == TermState.EMAILED
        assert controller.can_list_pets
        assert backend.donation_terms[10].adoption_conditions == "Casa com quintal"
        assert backend.sent_emails[-1][1:] == (PartyRole.DONOR, "ana@example.org")
        assert presenter.present_count == 1

    @pytest.mark.asyncio
    async def test_delivery_failure(
        self, controller: DonationTermController, backend: InMemoryAdoptionBackend
    ) -> None:
        await controller.open()
        await _sign(controller)
        backend.make_undeliverable(PartyRole.DONOR)

        with pytest.raises(TermDeliveryError) as exc_info:
            await controller.send_email()

        assert exc_info.value.failed_roles == (PartyRole.DONOR,)
        assert not controller.can_list_pets

    @pytest.mark.asyncio
    async def test_resigned_term_keeps_listing_unlocked(
        self,
        engine: AdoptionEngine,
        controller: DonationTermController,
        backend: InMemoryAdoptionBackend,
    ) -> None:
        """A donor who re-signs after a profile edit may keep listing pets."""
        await controller.open()
        await _sign(controller)
        await controller.send_email()
        backend.update_profile(10, email="ana@novo.org")

        reopened = engine.terms.for_donation(10)
        machine = await reopened.open()
        assert machine.state == TermState.DRAFTING
        assert machine.stale_roles == (PartyRole.DONOR,)

        await _sign(reopened)

        assert reopened.state == TermState.CREATED
        assert reopened.can_list_pets
        assert backend.calls["update_donation_term"] == 1
        assert backend.donation_terms[10].donor.email == "ana@novo.org"
