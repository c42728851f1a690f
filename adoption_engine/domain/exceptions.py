"""Base exception classes for the adoption engine domain layer."""


class AdoptionEngineError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application:
    callers can catch AdoptionEngineError to handle every business
    failure while letting programming errors propagate.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
