"""Event channel from engine coordinators to the session controller."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SpeechRecognized:
    text: str


@dataclass(frozen=True, slots=True)
class SpeechFailed:
    kind: str


@dataclass(frozen=True, slots=True)
class SpeechEnded:
    pass


SpeechInputEvent = SpeechRecognized | SpeechFailed | SpeechEnded


class EventChannel:
    """Single-consumer queue bound to the event loop that created it.

    ``post`` may be called from engine worker threads; delivery is always
    marshalled onto the owning loop so the consumer never races itself.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[SpeechInputEvent] = asyncio.Queue()

    def post(self, event: SpeechInputEvent) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._queue.put_nowait(event)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    async def get(self) -> SpeechInputEvent:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()
