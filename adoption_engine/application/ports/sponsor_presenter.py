"""Sponsor presenter port.

The presenter is the UI surface that shows a sponsor interstitial and
resolves once the user dismisses it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from adoption_engine.domain.models.sponsor_ad import SponsorAd


@runtime_checkable
class SponsorPresenterProtocol(Protocol):
    """Protocol for presenting a sponsor ad."""

    async def present(self, ad: SponsorAd) -> None:
        """Show the ad and return when the user dismisses it."""
        ...
