"""Permitted actions value object produced by the pet status guard."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PermittedActions:
    """Which actions a viewer may take on a pet right now.

    Attributes:
        can_favorite: Add or remove the pet from favorites.
        can_request_adopt: Ask to add the pet to "my pets" (adoption request).
        can_edit: Change the pet's registration data.
        can_delete: Remove the pet listing.
        can_communicate: Open messaging with the donor. Still subject to the
            adoption term reaching EMAILED.
        can_offer_for_adoption: Owner action that lists the pet publicly.
    """

    can_favorite: bool = False
    can_request_adopt: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_communicate: bool = False
    can_offer_for_adoption: bool = False

    @classmethod
    def none(cls) -> PermittedActions:
        """Nothing permitted (fail-closed result)."""
        return cls()

    def denied(self) -> list[str]:
        """Names of the actions that are not permitted."""
        return [name for name, allowed in vars(self).items() if not allowed]
