"""Domain services for the adoption engine.

Pure functions that hold business decisions and never perform I/O.

Available services:
- permitted_actions: Pet status guard
- classify_remote_error: Maps backend failures to an ErrorKind
- advance: Term lifecycle transition function
"""

from adoption_engine.domain.services.error_classifier import classify_remote_error
from adoption_engine.domain.services.pet_status_guard import permitted_actions
from adoption_engine.domain.services.term_transitions import advance

__all__: list[str] = ["advance", "classify_remote_error", "permitted_actions"]
