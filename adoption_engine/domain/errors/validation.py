"""Term validation errors.

Raised before any remote call when the user's form input is incomplete.
"""

from __future__ import annotations

from adoption_engine.domain.exceptions import AdoptionEngineError


class TermValidationError(AdoptionEngineError):
    """Raised when a term form is missing required input.

    Attributes:
        missing_fields: Names of the fields that failed validation.
    """

    def __init__(self, missing_fields: list[str], message: str = "") -> None:
        """Initialize term validation error.

        Args:
            missing_fields: Fields that are empty or not accepted.
            message: Optional override for the default message.
        """
        self.missing_fields = list(missing_fields)
        super().__init__(
            message or f"Required term fields missing: {', '.join(self.missing_fields)}"
        )
