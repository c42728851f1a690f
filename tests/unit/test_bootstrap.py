"""Unit tests for engine bootstrap and the singleton accessors."""

from pathlib import Path

import httpx
import pytest
import structlog

from adoption_engine.bootstrap import (
    AdoptionEngine,
    build_engine,
    get_engine,
    reset_engine,
    set_engine,
)
from adoption_engine.config.engine_config import EngineConfig
from adoption_engine.domain.models.party import PartyProfile


@pytest.fixture(autouse=True)
def clean_singleton():
    reset_engine()
    yield
    reset_engine()
    structlog.reset_defaults()


def _config(tmp_path: Path) -> EngineConfig:
    return EngineConfig(
        api_base_url="http://backend.test/api",
        device_store_path=tmp_path / "state.json",
        environment="development",
    )


class TestBuildEngine:
    """Tests for the production wiring."""

    @pytest.mark.asyncio
    async def test_engine_talks_http_with_session_token(self, tmp_path: Path) -> None:
        seen: list[httpx.Request] = []

        def handle(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"data": {"id": 42, "usuario_id": 10, "status_id": 2, "nome": "Rex"}}
            )

        engine = build_engine(_config(tmp_path), transport=httpx.MockTransport(handle))
        await engine.session.start(
            PartyProfile(user_id=20, name="Bruno Lima"), token="token-bruno"
        )

        pet = await engine.catalog.get_pet(42)
        await engine.aclose()

        assert pet.name == "Rex"
        assert seen[0].headers["Authorization"] == "Bearer token-bruno"
        assert (tmp_path / "state.json").exists()
        assert engine.api_client is not None

    def test_wires_shared_services(self, tmp_path: Path) -> None:
        engine = build_engine(_config(tmp_path))
        assert engine.favorites is not None
        assert engine.catalog.store is engine.pet_store
        assert engine.config.device_store_path == tmp_path / "state.json"


class TestSingleton:
    """Tests for get_engine / set_engine / reset_engine."""

    def test_set_and_get(self, engine: AdoptionEngine) -> None:
        set_engine(engine)
        assert get_engine() is engine

    def test_get_builds_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEVICE_STORE_PATH", str(tmp_path / "env.json"))
        monkeypatch.setenv("APP_ENVIRONMENT", "development")

        engine = get_engine()

        assert engine is get_engine()
        assert engine.config.device_store_path == tmp_path / "env.json"
        reset_engine()
        assert get_engine() is not engine
