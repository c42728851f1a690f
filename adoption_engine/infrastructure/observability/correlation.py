"""Correlation IDs for user actions.

Every user action (a toggle, an adoption request, a term submission)
runs under one correlation id so that the log lines of its remote calls,
rollbacks and follow-up effects can be grouped. The id lives in a
contextvar and therefore follows the action across await points and
into tasks spawned from it.

Usage:
    with correlation_scope():
        await favorites.toggle(pet_id)

    # In structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string when no action is in progress
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation ID (UUID4)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID, or an empty string when unset."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current context."""
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under a correlation ID and restore the previous one after.

    An already active ID is reused so nested actions share one trace.

    Args:
        correlation_id: Explicit ID to use; generated when omitted.

    Yields:
        The active correlation ID.
    """
    active = correlation_id or get_correlation_id() or generate_correlation_id()
    token = _correlation_id.set(active)
    try:
        yield active
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the current correlation_id to every entry."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
