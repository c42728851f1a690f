"""Sponsor interstitial gate.

Shows one randomly picked sponsor ad and waits for the user to dismiss
it. The gate never blocks a flow: without a presenter, or when the
presenter fails, it resolves immediately. Cancellation propagates.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Callable, Sequence

from adoption_engine.application.ports.sponsor_presenter import SponsorPresenterProtocol
from adoption_engine.application.services.base import LoggingMixin
from adoption_engine.domain.models.sponsor_ad import DEFAULT_SPONSOR_ADS, SponsorAd

AdChooser = Callable[[Sequence[SponsorAd]], SponsorAd]


class SponsorGateService(LoggingMixin):
    """Awaitable sponsor interstitial."""

    def __init__(
        self,
        presenter: SponsorPresenterProtocol | None = None,
        ads: Sequence[SponsorAd] = DEFAULT_SPONSOR_ADS,
        chooser: AdChooser = random.choice,
    ) -> None:
        self._presenter = presenter
        self._ads = tuple(ads)
        self._choose = chooser
        self._init_logger(component="sponsor")

    async def present(self) -> None:
        """Present an ad and return after dismissal (or immediately on failure)."""
        log = self._log_operation("present")
        if self._presenter is None or not self._ads:
            log.info("sponsor_gate_skipped", has_presenter=self._presenter is not None)
            return

        ad = self._choose(self._ads)
        log = log.bind(ad_id=ad.id, category=ad.category.value)
        try:
            await self._presenter.present(ad)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.warning("sponsor_presentation_failed", error=str(exc))
            return
        log.info("sponsor_dismissed")
