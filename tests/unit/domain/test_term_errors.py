"""Unit tests for domain errors.

Every business failure derives from AdoptionEngineError so callers can
catch the whole family while programming errors propagate.
"""

from __future__ import annotations

import pytest

from adoption_engine.domain.errors import (
    ActionNotPermittedError,
    CommunicationLockedError,
    DonationTermRequiredError,
    FavoriteToggleError,
    PetNotFoundError,
    RemoteCallError,
    SelfAdoptionError,
    SessionExpiredError,
    TermControllerClosedError,
    TermDeliveryError,
    TermOperationInProgressError,
    TermServiceUnavailableError,
    TermValidationError,
)
from adoption_engine.domain.exceptions import AdoptionEngineError
from adoption_engine.domain.models.party import PartyRole
from adoption_engine.domain.models.term_lifecycle import TermState


class TestHierarchy:
    """Tests for the common base class."""

    @pytest.mark.parametrize(
        "error_class",
        [
            ActionNotPermittedError,
            CommunicationLockedError,
            DonationTermRequiredError,
            FavoriteToggleError,
            PetNotFoundError,
            RemoteCallError,
            SelfAdoptionError,
            SessionExpiredError,
            TermControllerClosedError,
            TermDeliveryError,
            TermOperationInProgressError,
            TermServiceUnavailableError,
            TermValidationError,
        ],
    )
    def test_inherits_from_engine_error(self, error_class: type) -> None:
        assert issubclass(error_class, AdoptionEngineError)


class TestTermDeliveryError:
    """Tests for TermDeliveryError."""

    def test_message_names_each_failed_recipient(self) -> None:
        """The user can see which address did not receive the term."""
        error = TermDeliveryError(
            term_id=7,
            failed_recipients=((PartyRole.DONOR, "ana@example.org"),),
        )
        assert "donor <ana@example.org>" in str(error)
        assert error.failed_roles == (PartyRole.DONOR,)

    def test_unknown_address(self) -> None:
        error = TermDeliveryError(7, ((PartyRole.ADOPTER, None),), detail="smtp down")
        assert "adopter <unknown address>" in str(error)
        assert "smtp down" in str(error)


class TestTermValidationError:
    """Tests for TermValidationError."""

    def test_lists_missing_fields(self) -> None:
        error = TermValidationError(["signature", "lives_in_house"])
        assert error.missing_fields == ["signature", "lives_in_house"]
        assert "signature, lives_in_house" in str(error)

    def test_custom_message(self) -> None:
        with pytest.raises(TermValidationError) as exc_info:
            raise TermValidationError(["motive"], "Informe o motivo")
        assert str(exc_info.value) == "Informe o motivo"


class TestSessionExpiredError:
    """Tests for SessionExpiredError."""

    def test_default_message_names_operation(self) -> None:
        assert "during add_favorite" in str(SessionExpiredError("add_favorite"))

    def test_backend_message_kept(self) -> None:
        error = SessionExpiredError("get_pet", "Token expirado")
        assert str(error) == "Token expirado"
        assert error.operation == "get_pet"


class TestLifecycleErrors:
    """Tests for the term lifecycle errors."""

    def test_operation_in_progress_carries_key(self) -> None:
        error = TermOperationInProgressError((42, 20), "send_email")
        assert error.term_key == (42, 20)
        assert "send_email rejected" in str(error)

    def test_communication_locked_reports_state(self) -> None:
        error = CommunicationLockedError(42, 20, TermState.CREATED)
        assert error.state == TermState.CREATED
        assert "CREATED" in str(error)

    def test_service_unavailable_detail(self) -> None:
        assert str(TermServiceUnavailableError("submit")) == (
            "Term service unavailable during submit"
        )
        assert "timeout" in str(TermServiceUnavailableError("submit", "timeout"))

    def test_favorite_toggle_error_reports_restored_flag(self) -> None:
        error = FavoriteToggleError(42, restored=False, detail="boom")
        assert error.restored is False
        assert str(error) == "Could not update favorite for pet 42: boom"
