"""Tagged classification of remote failures.

The backend's error contract is informal (HTTP status plus a free-text
message). Every remote failure is mapped once to an ErrorKind so that no
other code inspects message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Closed set of remote failure categories.

    Kinds:
        SESSION_EXPIRED: Authentication no longer valid; caller must re-login.
        VALIDATION: Required data missing or rejected.
        ALREADY_EXISTS: Entity already exists (duplicate create).
        SELF_ADOPTION: User tried to adopt their own pet.
        READOPTION: User previously had this pet; default path is blocked.
        NOT_FOUND: Entity does not exist.
        FORBIDDEN: Action not allowed for this user.
        DELIVERY: Email could not be delivered.
        TRANSIENT: Network failure or server error; retry is safe.
        UNKNOWN: Message not recognized.
    """

    SESSION_EXPIRED = "session_expired"
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    SELF_ADOPTION = "self_adoption"
    READOPTION = "readoption"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    DELIVERY = "delivery"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"

    @property
    def is_retryable(self) -> bool:
        """Whether retrying the same call may succeed."""
        return self in (ErrorKind.TRANSIENT, ErrorKind.DELIVERY, ErrorKind.UNKNOWN)


@dataclass(frozen=True)
class ClassifiedError:
    """A remote failure with its classification.

    Attributes:
        kind: Classified category.
        message: Raw backend message, kept for display and logs.
        status_code: HTTP status, or None when no response arrived.
    """

    kind: ErrorKind
    message: str
    status_code: int | None = None
