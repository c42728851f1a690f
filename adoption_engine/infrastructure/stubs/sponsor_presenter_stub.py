"""Sponsor presenter stub for testing.

Records every presented ad. By default an ad is dismissed immediately;
with ``hold=True`` each presentation waits until ``dismiss()`` is called
so tests can observe a flow blocked on the interstitial.
"""

from __future__ import annotations

import asyncio

from adoption_engine.domain.models.sponsor_ad import SponsorAd


class SponsorPresenterStub:
    """SponsorPresenterProtocol stub."""

    def __init__(self, hold: bool = False, fail_with: Exception | None = None) -> None:
        self.presented: list[SponsorAd] = []
        self._hold = hold
        self._fail_with = fail_with
        self._dismissed = asyncio.Event()

    @property
    def present_count(self) -> int:
        return len(self.presented)

    async def present(self, ad: SponsorAd) -> None:
        self.presented.append(ad)
        if self._fail_with is not None:
            raise self._fail_with
        if self._hold:
            await self._dismissed.wait()
            self._dismissed.clear()

    def dismiss(self) -> None:
        """Release a held presentation."""
        self._dismissed.set()
