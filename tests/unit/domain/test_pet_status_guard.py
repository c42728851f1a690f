"""Unit tests for the pet status guard."""

import pytest

from adoption_engine.domain.models.permitted_actions import PermittedActions
from adoption_engine.domain.models.pet import Pet, PetStatus
from adoption_engine.domain.services.pet_status_guard import permitted_actions

OWNER = 10
VISITOR = 20


def _pet(status: int) -> Pet:
    return Pet(id=42, owner_id=OWNER, status_code=status, name="Rex")


class TestOwnerActions:
    """Tests for what the owner may do with their own pet."""

    def test_owner_never_requests_or_communicates(self) -> None:
        """Owners cannot request adoption of, or message about, their own pet."""
        for status in PetStatus:
            actions = permitted_actions(_pet(int(status)), OWNER)
            assert actions.can_request_adopt is False
            assert actions.can_communicate is False

    @pytest.mark.parametrize(
        ("status", "editable"),
        [
            (PetStatus.DRAFT, True),
            (PetStatus.AVAILABLE, False),
            (PetStatus.PENDING, True),
            (PetStatus.ADOPTED, False),
        ],
    )
    def test_edit_and_delete_follow_status(self, status: PetStatus, editable: bool) -> None:
        """Owners may edit or delete only while the pet is DRAFT or PENDING."""
        actions = permitted_actions(_pet(int(status)), OWNER)
        assert actions.can_edit is editable
        assert actions.can_delete is editable

    def test_offer_only_from_draft(self) -> None:
        """Offering for adoption is possible once, from DRAFT."""
        assert permitted_actions(_pet(1), OWNER).can_offer_for_adoption is True
        assert permitted_actions(_pet(2), OWNER).can_offer_for_adoption is False

    def test_owner_can_favorite(self) -> None:
        assert permitted_actions(_pet(2), OWNER).can_favorite is True


class TestVisitorActions:
    """Tests for users who do not own the pet."""

    @pytest.mark.parametrize(
        ("status", "requestable"),
        [
            (PetStatus.DRAFT, False),
            (PetStatus.AVAILABLE, True),
            (PetStatus.PENDING, True),
            (PetStatus.ADOPTED, False),
        ],
    )
    def test_request_adopt_by_status(self, status: PetStatus, requestable: bool) -> None:
        """Adoption may be requested while AVAILABLE or PENDING."""
        assert permitted_actions(_pet(int(status)), VISITOR).can_request_adopt is requestable

    def test_visitor_never_edits(self) -> None:
        actions = permitted_actions(_pet(1), VISITOR)
        assert actions.can_edit is False
        assert actions.can_delete is False
        assert actions.can_offer_for_adoption is False

    def test_visitor_may_communicate(self) -> None:
        """Communication is allowed by the guard; the term gate applies separately."""
        assert permitted_actions(_pet(2), VISITOR).can_communicate is True


class TestFailClosed:
    """Tests for unknown inputs."""

    def test_unknown_status_permits_nothing(self) -> None:
        """An unrecognized status code yields no permitted action."""
        assert permitted_actions(_pet(99), VISITOR) == PermittedActions.none()
        assert permitted_actions(_pet(99), OWNER) == PermittedActions.none()

    def test_anonymous_viewer_permits_nothing(self) -> None:
        assert permitted_actions(_pet(2), None) == PermittedActions.none()

    def test_denied_lists_forbidden_actions(self) -> None:
        actions = permitted_actions(_pet(4), VISITOR)
        assert "can_request_adopt" in actions.denied()
        assert "can_favorite" not in actions.denied()
