"""Helpers translating classified remote failures into service errors."""

from __future__ import annotations

from adoption_engine.domain.errors.remote import RemoteCallError
from adoption_engine.domain.errors.session import SessionExpiredError
from adoption_engine.domain.models.remote_error import ErrorKind


def raise_if_session_expired(exc: RemoteCallError, operation: str) -> None:
    """Raise SessionExpiredError (chained) when the failure is a dead session."""
    if exc.kind == ErrorKind.SESSION_EXPIRED:
        raise SessionExpiredError(operation, exc.message) from exc
