"""Trailing-edge debouncer on the running event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class Debouncer:
    """Run an action once, ``delay`` seconds after the last trigger.

    Each trigger cancels the pending run and schedules a new one. A zero
    delay still defers the action to the next loop iteration.
    """

    def __init__(self, delay: float, action: Callable[[], None]) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._delay = delay
        self._action = action
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """Schedule the action, replacing any pending run."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run a pending action now."""
        if self._handle is not None:
            self._fire()

    def _fire(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._action()
