"""Unit tests for correlation ids and logging configuration."""

import asyncio

import pytest
import structlog

from adoption_engine.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from adoption_engine.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_component,
)


class TestCorrelationScope:
    """Tests for correlation_scope."""

    def test_scope_sets_and_restores(self) -> None:
        assert get_correlation_id() == ""
        with correlation_scope() as correlation_id:
            assert get_correlation_id() == correlation_id
            assert len(correlation_id) == 36
        assert get_correlation_id() == ""

    def test_nested_scope_reuses_outer_id(self) -> None:
        with correlation_scope("outer") as outer:
            with correlation_scope() as inner:
                assert inner == outer == "outer"

    @pytest.mark.asyncio
    async def test_id_follows_spawned_tasks(self) -> None:
        async def read() -> str:
            await asyncio.sleep(0)
            return get_correlation_id()

        with correlation_scope("action-1"):
            task = asyncio.create_task(read())
        assert await task == "action-1"

    @pytest.mark.asyncio
    async def test_set_is_task_local(self) -> None:
        async def set_inside() -> None:
            set_correlation_id("inside")

        await asyncio.create_task(set_inside())
        assert get_correlation_id() == ""


class TestProcessor:
    """Tests for the structlog processor."""

    def test_adds_id_when_active(self) -> None:
        with correlation_scope("abc"):
            event = correlation_id_processor(None, "info", {"event": "x"})
        assert event["correlation_id"] == "abc"

    def test_leaves_event_without_scope(self) -> None:
        assert correlation_id_processor(None, "info", {"event": "x"}) == {"event": "x"}


class TestConfigureStructlog:
    """Tests for logging configuration."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_production_renders_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_structlog("production", level="INFO")
        with correlation_scope("abc"):
            get_logger_for_component("Test", "unit").info("something_happened", pet_id=42)

        line = capsys.readouterr().out.strip()
        assert '"event": "something_happened"' in line
        assert '"correlation_id": "abc"' in line
        assert '"component": "unit"' in line

    def test_level_filters_debug(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_structlog("production", level="WARNING")
        structlog.get_logger().info("hidden")
        assert capsys.readouterr().out == ""
