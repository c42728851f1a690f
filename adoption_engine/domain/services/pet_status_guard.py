"""Pet status guard.

Pure decision logic consulted synchronously before any remote call.
Maps a pet's status and the viewer's relationship to the pet to the set
of permitted actions.

Rules:
- Owners never request adoption of, or open messaging about, their own pet.
- Owners may edit/delete only while DRAFT or PENDING; AVAILABLE and
  ADOPTED pets are frozen against edits while adoption flows may be in flight.
- Owners may offer a pet for adoption only from DRAFT. Once AVAILABLE the
  same offer action is no longer requestable (duplicate-offer prevention).
- Non-owners may request adoption while AVAILABLE or PENDING, and may
  communicate for any known status (the adoption term gate still applies).
- Unknown status codes permit nothing.
"""

from __future__ import annotations

from adoption_engine.domain.models.permitted_actions import PermittedActions
from adoption_engine.domain.models.pet import Pet, PetStatus

_OWNER_EDITABLE: frozenset[PetStatus] = frozenset({PetStatus.DRAFT, PetStatus.PENDING})
_OWNER_OFFERABLE: frozenset[PetStatus] = frozenset({PetStatus.DRAFT})
_REQUESTABLE: frozenset[PetStatus] = frozenset({PetStatus.AVAILABLE, PetStatus.PENDING})


def permitted_actions(pet: Pet, viewer_id: int | None) -> PermittedActions:
    """Compute what the viewer may do with the pet.

    This function never raises.

    Args:
        pet: Cached pet.
        viewer_id: Acting user id, or None when nobody is logged in.

    Returns:
        PermittedActions for this viewer and status.
    """
    status = pet.status
    if status is None or viewer_id is None:
        return PermittedActions.none()

    if pet.is_owned_by(viewer_id):
        editable = status in _OWNER_EDITABLE
        return PermittedActions(
            can_favorite=True,
            can_request_adopt=False,
            can_edit=editable,
            can_delete=editable,
            can_communicate=False,
            can_offer_for_adoption=status in _OWNER_OFFERABLE,
        )

    return PermittedActions(
        can_favorite=True,
        can_request_adopt=status in _REQUESTABLE,
        can_edit=False,
        can_delete=False,
        can_communicate=True,
        can_offer_for_adoption=False,
    )
