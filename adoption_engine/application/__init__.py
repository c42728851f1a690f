"""
Application layer - Use cases and orchestration for the adoption engine.

This layer contains:
- Port definitions (interfaces for infrastructure)
- Coordinators and controllers (favorites, terms, adoption requests)
- Device state helpers (session, local pet store, local term cache)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure (except observability helpers)
"""
