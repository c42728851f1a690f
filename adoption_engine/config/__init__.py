"""Configuration module for the adoption engine.

Available Configurations:
- EngineConfig: Remote service, favorites debounce and device storage
"""

from adoption_engine.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    TEST_ENGINE_CONFIG,
    EngineConfig,
)

__all__ = [
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "TEST_ENGINE_CONFIG",
]
