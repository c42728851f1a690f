"""
Infrastructure layer - Adapters for the adoption engine's ports.

This layer contains:
- HTTP adapter for the remote adoption service (httpx)
- Device key/value storage (JSON file)
- In-memory stubs for tests and local development
- Observability (structlog configuration, correlation IDs)
"""
