"""Remote call errors.

Adapters raise RemoteCallError for every non-success backend answer and
every transport failure. Services read ``classification`` rather than
matching on message text.
"""

from __future__ import annotations

from functools import cached_property

from adoption_engine.domain.exceptions import AdoptionEngineError
from adoption_engine.domain.models.remote_error import ClassifiedError, ErrorKind
from adoption_engine.domain.services.error_classifier import classify_remote_error


class RemoteCallError(AdoptionEngineError):
    """Raised when the remote service rejects or fails a call.

    Attributes:
        status_code: HTTP status, or None for transport failures.
        message: Backend message (or transport error text).
        operation: Port operation name, for logs.
    """

    def __init__(
        self, status_code: int | None, message: str = "", operation: str = ""
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.operation = operation
        status = status_code if status_code is not None else "no response"
        super().__init__(f"Remote call {operation or 'request'} failed ({status}): {message}")

    @cached_property
    def classification(self) -> ClassifiedError:
        """Classified form of this failure."""
        return classify_remote_error(self.status_code, self.message)

    @property
    def kind(self) -> ErrorKind:
        return self.classification.kind
