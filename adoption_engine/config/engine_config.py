"""Adoption engine configuration.

Configuration for the remote adoption service, favorites re-sort
debounce and device storage, with environment variable overrides.

Environment Variables:
- ADOPTION_API_BASE_URL: Backend base URL (default: http://10.0.2.2:3000/api)
- ADOPTION_API_TIMEOUT_SECONDS: Request timeout (default: 10.0, min: 1.0, max: 120.0)
- FAVORITE_RESORT_DELAY_SECONDS: Debounce before re-sorting listings after a
  favorite toggle (default: 0.3, min: 0.0, max: 5.0)
- DEVICE_STORE_PATH: JSON file holding device state (default: .adoption_engine/device_state.json)
- APP_ENVIRONMENT: 'production' or 'development' (default: production)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Android emulator host loopback, as used by the mobile client in development
DEFAULT_API_BASE_URL = "http://10.0.2.2:3000/api"

DEFAULT_API_TIMEOUT_SECONDS = 10.0
MIN_API_TIMEOUT_SECONDS = 1.0
MAX_API_TIMEOUT_SECONDS = 120.0

DEFAULT_FAVORITE_RESORT_DELAY_SECONDS = 0.3
MIN_FAVORITE_RESORT_DELAY_SECONDS = 0.0
MAX_FAVORITE_RESORT_DELAY_SECONDS = 5.0

DEFAULT_DEVICE_STORE_PATH = ".adoption_engine/device_state.json"

VALID_ENVIRONMENTS = frozenset({"production", "development"})
DEFAULT_ENVIRONMENT = "production"


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for the adoption engine.

    Attributes:
        api_base_url: Backend base URL, without trailing slash.
        api_timeout_seconds: Per-request timeout.
        favorite_resort_delay_seconds: Debounce delay for listing re-sorts.
        device_store_path: File backing the device key/value store.
        environment: 'production' (JSON logs) or 'development' (console logs).
    """

    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS
    favorite_resort_delay_seconds: float = DEFAULT_FAVORITE_RESORT_DELAY_SECONDS
    device_store_path: Path = Path(DEFAULT_DEVICE_STORE_PATH)
    environment: str = DEFAULT_ENVIRONMENT

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"api_base_url must be an http(s) URL, got {self.api_base_url!r}"
            )
        if not (
            MIN_API_TIMEOUT_SECONDS <= self.api_timeout_seconds <= MAX_API_TIMEOUT_SECONDS
        ):
            raise ValueError(
                f"api_timeout_seconds must be between {MIN_API_TIMEOUT_SECONDS} "
                f"and {MAX_API_TIMEOUT_SECONDS}, got {self.api_timeout_seconds}"
            )
        if not (
            MIN_FAVORITE_RESORT_DELAY_SECONDS
            <= self.favorite_resort_delay_seconds
            <= MAX_FAVORITE_RESORT_DELAY_SECONDS
        ):
            raise ValueError(
                "favorite_resort_delay_seconds must be between "
                f"{MIN_FAVORITE_RESORT_DELAY_SECONDS} and "
                f"{MAX_FAVORITE_RESORT_DELAY_SECONDS}, "
                f"got {self.favorite_resort_delay_seconds}"
            )
        if self.environment not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {sorted(VALID_ENVIRONMENTS)}, "
                f"got {self.environment!r}"
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> EngineConfig:
        """Create config from environment variables with defaults.

        Numeric values are clamped to their valid range; an unknown
        APP_ENVIRONMENT is rejected by validation.

        Returns:
            EngineConfig with values from environment or defaults.
        """
        timeout = _clamp(
            _get_float_env("ADOPTION_API_TIMEOUT_SECONDS", DEFAULT_API_TIMEOUT_SECONDS),
            MIN_API_TIMEOUT_SECONDS,
            MAX_API_TIMEOUT_SECONDS,
        )
        resort_delay = _clamp(
            _get_float_env(
                "FAVORITE_RESORT_DELAY_SECONDS", DEFAULT_FAVORITE_RESORT_DELAY_SECONDS
            ),
            MIN_FAVORITE_RESORT_DELAY_SECONDS,
            MAX_FAVORITE_RESORT_DELAY_SECONDS,
        )
        return cls(
            api_base_url=os.environ.get("ADOPTION_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            api_timeout_seconds=timeout,
            favorite_resort_delay_seconds=resort_delay,
            device_store_path=Path(
                os.environ.get("DEVICE_STORE_PATH", DEFAULT_DEVICE_STORE_PATH)
            ),
            environment=os.environ.get("APP_ENVIRONMENT", DEFAULT_ENVIRONMENT).lower(),
        )


# Default production config
DEFAULT_ENGINE_CONFIG = EngineConfig()

# Testing config: no re-sort delay, development logging
TEST_ENGINE_CONFIG = EngineConfig(
    favorite_resort_delay_seconds=MIN_FAVORITE_RESORT_DELAY_SECONDS,
    environment="development",
)
