"""Logging mixin shared by the engine services.

Services bind one logger at construction, tagged with their class name
and a component ("favorites", "terms", "catalog", ...). Each user action
then derives an operation logger carrying the action name, the ids it
touches and, inside a correlation scope, the action's correlation id.

Usage:
    class PetCatalogService(LoggingMixin):
        def __init__(self, pets: PetApiProtocol) -> None:
            self._pets = pets
            self._init_logger(component="catalog")

        async def get_pet(self, pet_id: int) -> Pet:
            log = self._log_operation("get_pet", pet_id=pet_id)
            log.info("pet_fetched")
"""

import structlog

from adoption_engine.infrastructure.observability.correlation import get_correlation_id
from adoption_engine.infrastructure.observability.logging import (
    get_logger_for_component,
)


class LoggingMixin:
    """Structured logging for engine services.

    Attributes:
        _log: Logger bound with ``service`` and ``component``.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "adoption") -> None:
        """Bind the service logger. Call from ``__init__``."""
        self._log = get_logger_for_component(type(self).__name__, component)

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Logger for one operation.

        The correlation id is bound only while a user action is running,
        so log lines emitted outside any scope carry no empty id.

        Args:
            operation: Operation name, e.g. ``"toggle"`` or ``"send_email"``.
            **context: Ids and flags describing the call (``pet_id``, ...).
        """
        correlation_id = get_correlation_id()
        if correlation_id:
            context["correlation_id"] = correlation_id
        return self._log.bind(operation=operation, **context)
