"""Unit tests for SponsorGateService."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from adoption_engine.application.ports.sponsor_presenter import SponsorPresenterProtocol
from adoption_engine.application.services.sponsor_gate_service import SponsorGateService
from adoption_engine.domain.models.sponsor_ad import DEFAULT_SPONSOR_ADS
from adoption_engine.infrastructure.stubs.sponsor_presenter_stub import (
    SponsorPresenterStub,
)


def _first(ads):
    return ads[0]


class TestSponsorGate:
    """Tests for the awaitable interstitial."""

    @pytest.mark.asyncio
    async def test_presents_chosen_ad(self) -> None:
        presenter = SponsorPresenterStub()
        gate = SponsorGateService(presenter, chooser=_first)

        await gate.present()

        assert presenter.presented == [DEFAULT_SPONSOR_ADS[0]]

    @pytest.mark.asyncio
    async def test_waits_for_dismissal(self) -> None:
        """The gate resolves only after the user dismisses the ad."""
        presenter = SponsorPresenterStub(hold=True)
        gate = SponsorGateService(presenter)

        task = asyncio.create_task(gate.present())
        await asyncio.sleep(0)
        assert not task.done()
        assert presenter.present_count == 1

        presenter.dismiss()
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_without_presenter_resolves_immediately(self) -> None:
        await SponsorGateService(None).present()

    @pytest.mark.asyncio
    async def test_presenter_failure_does_not_block(self) -> None:
        presenter = SponsorPresenterStub(fail_with=RuntimeError("no window"))
        await SponsorGateService(presenter).present()
        assert presenter.present_count == 1

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self) -> None:
        gate = SponsorGateService(SponsorPresenterStub(hold=True))
        task = asyncio.create_task(gate.present())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_empty_catalog_skips(self) -> None:
        presenter = SponsorPresenterStub()
        await SponsorGateService(presenter, ads=()).present()
        assert presenter.present_count == 0


class TestPresenterPort:
    """Tests against a mocked presenter port."""

    @pytest.fixture
    def mock_presenter(self) -> AsyncMock:
        return AsyncMock(spec=SponsorPresenterProtocol)

    @pytest.mark.asyncio
    async def test_awaits_presenter_once(self, mock_presenter: AsyncMock) -> None:
        gate = SponsorGateService(mock_presenter, chooser=_first)

        await gate.present()

        mock_presenter.present.assert_awaited_once_with(DEFAULT_SPONSOR_ADS[0])

    @pytest.mark.asyncio
    async def test_timeout_from_presenter_is_swallowed(
        self, mock_presenter: AsyncMock
    ) -> None:
        mock_presenter.present.side_effect = TimeoutError("presenter gone")
        await SponsorGateService(mock_presenter).present()
        mock_presenter.present.assert_awaited_once()
