"""
Domain layer - Pure business logic for the adoption engine.

This layer contains:
- Domain models (pets, parties, terms, delivery reports)
- Pure decision services (status guard, error classifier, term transitions)
- Domain exceptions

This layer must NOT import from application or infrastructure.
"""

from adoption_engine.domain.exceptions import AdoptionEngineError

__all__: list[str] = ["AdoptionEngineError"]
