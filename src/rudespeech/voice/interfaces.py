"""Contracts for speech recognition and synthesis engines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Sequence

from rudespeech.models import Voice


@dataclass(frozen=True, slots=True)
class Utterance:
    """One discrete unit of synthesized speech."""

    text: str
    voice: Voice | None = None
    pitch: float = 1.0
    rate: float = 1.0


class SpeechInputEngine(Protocol):
    """Captures one utterance per ``start()`` and reports through its callbacks.

    ``on_result``/``on_error`` fire at most once per capture, ``on_end`` always
    fires last.
    """

    on_result: Callable[[str], None] | None
    on_error: Callable[[str], None] | None
    on_end: Callable[[], None] | None

    def start(self) -> None:
        """Begin capturing; raises if the engine cannot start."""

    def stop(self) -> None:
        """Request the running capture to finish."""


class SpeechOutputEngine(Protocol):
    """Process-wide speech synthesizer."""

    @property
    def speaking(self) -> bool:
        """Whether an utterance is currently audible."""

    def cancel(self) -> None:
        """Stop the current utterance."""

    def speak(self, utterance: Utterance) -> None:
        """Start playing ``utterance``."""

    def get_voices(self) -> Sequence[Voice]:
        """Return the voices currently known to the engine."""

    def on_voices_changed(self, callback: Callable[[], None]) -> None:
        """Register a callback fired when the voice catalog finishes loading."""
