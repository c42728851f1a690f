"""Unit tests for KeyedLock and Debouncer."""

import asyncio

import pytest

from adoption_engine.application.services.debounce import Debouncer
from adoption_engine.application.services.keyed_lock import KeyedLock


class TestKeyedLock:
    """Tests for the non-blocking keyed lock."""

    def test_second_acquire_fails(self) -> None:
        lock = KeyedLock()
        assert lock.try_acquire(("favorite", 42)) is True
        assert lock.try_acquire(("favorite", 42)) is False
        assert lock.is_held(("favorite", 42))

    def test_keys_are_independent(self) -> None:
        lock = KeyedLock()
        assert lock.try_acquire(("favorite", 42))
        assert lock.try_acquire(("favorite", 43))
        assert lock.held_keys == frozenset({("favorite", 42), ("favorite", 43)})

    def test_holding_releases_on_exit(self) -> None:
        lock = KeyedLock()
        with lock.holding("k") as acquired:
            assert acquired is True
            with lock.holding("k") as nested:
                assert nested is False
            # The nested block did not own the key and must not release it.
            assert lock.is_held("k")
        assert not lock.is_held("k")

    def test_holding_releases_on_error(self) -> None:
        lock = KeyedLock()
        with pytest.raises(RuntimeError):
            with lock.holding("k"):
                raise RuntimeError("boom")
        assert not lock.is_held("k")


class TestDebouncer:
    """Tests for the trailing-edge debouncer."""

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError, match="delay must be >= 0"):
            Debouncer(-1, lambda: None)

    @pytest.mark.asyncio
    async def test_burst_runs_once(self) -> None:
        """Several triggers inside the delay collapse into one run."""
        calls: list[int] = []
        debouncer = Debouncer(0.01, lambda: calls.append(1))

        for _ in range(5):
            debouncer.trigger()
        assert debouncer.pending
        await asyncio.sleep(0.05)

        assert calls == [1]
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_zero_delay_is_deferred(self) -> None:
        calls: list[int] = []
        debouncer = Debouncer(0, lambda: calls.append(1))
        debouncer.trigger()
        assert calls == []
        await asyncio.sleep(0.01)
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_flush_and_cancel(self) -> None:
        calls: list[int] = []
        debouncer = Debouncer(10, lambda: calls.append(1))

        debouncer.trigger()
        debouncer.flush()
        assert calls == [1]

        debouncer.trigger()
        debouncer.cancel()
        debouncer.flush()
        assert calls == [1]
