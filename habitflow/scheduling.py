"""Cancellable periodic tick sources for the focus timer.

A scheduler hands out one handle per ``every()`` call. Cancelling a
handle is idempotent and guarantees its callback never fires again.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol


logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def every(self, interval: float, callback: TickCallback) -> TickHandle: ...


# ── Manual (tests, headless) ──────────────────────────────────


class ManualHandle:
    def __init__(self, scheduler: ManualScheduler, interval: float, callback: TickCallback) -> None:
        self._scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._scheduler._handles.remove(self)


class ManualScheduler:
    """Fires callbacks only when told to via advance()."""

    def __init__(self) -> None:
        self._handles: list[ManualHandle] = []

    def every(self, interval: float, callback: TickCallback) -> ManualHandle:
        handle = ManualHandle(self, interval, callback)
        self._handles.append(handle)
        return handle

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def advance(self, ticks: int = 1) -> None:
        """Fire every active callback *ticks* times, one round at a time."""
        for _ in range(ticks):
            for handle in list(self._handles):
                if handle.active:
                    handle.callback()


# ── asyncio ───────────────────────────────────────────────────


class AsyncioHandle:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: TickCallback) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._timer: asyncio.TimerHandle | None = loop.call_later(interval, self._fire)

    @property
    def active(self) -> bool:
        return self._timer is not None

    def _fire(self) -> None:
        if self._timer is None:
            return
        # Re-arm before the callback so a cancel() inside it sticks.
        self._timer = self._loop.call_later(self._interval, self._fire)
        try:
            self._callback()
        except Exception:
            logger.exception("Tick callback failed")

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class AsyncioScheduler:
    """Ticks on an asyncio event loop, in the loop's thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def every(self, interval: float, callback: TickCallback) -> AsyncioHandle:
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioHandle(loop, interval, callback)
