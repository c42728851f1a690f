"""Bootstrap: configuration loading, logging setup and service wiring."""

from adoption_engine.bootstrap.container import (
    AdoptionEngine,
    BackendPorts,
    build_engine,
    get_engine,
    reset_engine,
    set_engine,
    wire_engine,
)
from adoption_engine.bootstrap.logging import configure_structlog

__all__: list[str] = [
    "AdoptionEngine",
    "BackendPorts",
    "build_engine",
    "configure_structlog",
    "get_engine",
    "reset_engine",
    "set_engine",
    "wire_engine",
]
