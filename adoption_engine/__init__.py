"""
Pet Adoption Engine - Consent & Lifecycle core for the adoption marketplace client.

Decides when adoption actions are permitted and what state results:
- Pet status guard (who may favorite, request, edit, talk)
- Adoption and donation term lifecycles (sign, re-sign, email)
- Optimistic favorites and adoption requests against an unreliable backend
- Device-local caches that survive restarts but never outrank the server
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
