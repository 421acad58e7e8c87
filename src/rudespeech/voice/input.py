"""Speech capture coordination between a recognition engine and the session."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from rudespeech.events import SpeechEnded, SpeechFailed, SpeechInputEvent, SpeechRecognized

from .interfaces import SpeechInputEngine


class NotAvailableError(RuntimeError):
    """Raised when speech input is requested but no recognition engine exists."""


@dataclass(frozen=True, slots=True)
class RecognitionConfig:
    """Recognition parameters handed to the engine."""

    continuous: bool = False
    interim_results: bool = False
    max_alternatives: int = 1
    language: str = "en-US"


class SpeechInputCoordinator:
    """Thin pass-through over a recognition engine.

    Engine callbacks are translated into events and handed to ``sink``; the
    owner treats ``SpeechEnded`` as the authoritative end of a capture.
    """

    def __init__(
        self,
        engine: SpeechInputEngine | None,
        sink: Callable[[SpeechInputEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._sink = sink
        self._logger = logger or logging.getLogger("rudespeech.voice.input")
        self._active = False

        if self._engine is not None:
            self._engine.on_result = self._handle_result
            self._engine.on_error = self._handle_error
            self._engine.on_end = self._handle_end

    @property
    def available(self) -> bool:
        return self._engine is not None

    @property
    def active(self) -> bool:
        return self._active

    def bind(self, sink: Callable[[SpeechInputEvent], None]) -> None:
        self._sink = sink

    def start(self) -> None:
        if self._engine is None:
            raise NotAvailableError("No speech recognition engine is available")

        # Engines may report the end of capture from inside start().
        self._active = True
        try:
            self._engine.start()
        except Exception:
            self._active = False
            raise
        self._logger.info("speech_input_started")

    def stop(self) -> None:
        """Ask the engine to finish. A no-op when nothing is being captured."""
        if self._engine is None or not self._active:
            return
        self._logger.info("speech_input_stop_requested")
        self._engine.stop()

    def _handle_result(self, text: str) -> None:
        self._emit(SpeechRecognized(text=text.strip()))

    def _handle_error(self, kind: str) -> None:
        self._logger.warning("speech_input_failed", extra={"kind": kind})
        self._emit(SpeechFailed(kind=kind))

    def _handle_end(self) -> None:
        self._active = False
        self._emit(SpeechEnded())

    def _emit(self, event: SpeechInputEvent) -> None:
        if self._sink is None:
            self._logger.warning("speech_input_event_dropped", extra={"event": type(event).__name__})
            return
        self._sink(event)
