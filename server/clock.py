"""Real-time collaborators for the server: event-loop clock and speech queue."""

import asyncio
from typing import Callable

from core.interfaces import Clock, Speaker


class LoopClock(Clock):
    """Ticks once per second on the running asyncio loop.

    Ticks run on the loop thread, interleaved with request handlers but
    never concurrently with them.
    """

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._callback = None
        self._handle = None

    def start(self, callback: Callable[[], None]) -> None:
        self.stop()
        self._callback = callback
        self._schedule()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def _schedule(self) -> None:
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        callback = self._callback
        self._handle = None
        if callback is None:
            return
        # Reschedule first so a callback that ends the round can cancel it
        self._schedule()
        callback()


class QueueSpeaker(Speaker):
    """Collects utterances for the client to pronounce."""

    def __init__(self):
        self._pending = []

    def speak(self, text: str) -> None:
        self._pending.append(text)

    def drain(self) -> list[str]:
        pending, self._pending = self._pending, []
        return pending
