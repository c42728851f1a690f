"""Session errors.

Raised when the backend rejects the stored credentials. The device
session is cleared before this propagates; the caller must send the user
back to login.
"""

from __future__ import annotations

from adoption_engine.domain.exceptions import AdoptionEngineError


class SessionExpiredError(AdoptionEngineError):
    """Raised when the backend answers 401 or reports an expired session.

    Attributes:
        operation: Operation that hit the expired session.
    """

    def __init__(self, operation: str = "", message: str = "") -> None:
        self.operation = operation
        detail = f" during {operation}" if operation else ""
        super().__init__(message or f"Session expired{detail}. Please log in again.")
