"""Speech-output engine powered by ``pyttsx3``."""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Callable

from rudespeech.models import Voice

from .interfaces import SpeechOutputEngine, Utterance

_TAG_RE = re.compile(r"([a-zA-Z]{2,3})(?:[-_]([a-zA-Z0-9]{2,8}))?")


def normalize_language_tag(raw: Any) -> str:
    """Turn pyttsx3 language entries (``en_US``, ``b"\\x05en-us"``) into ``en-US`` style tags."""
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")

    match = _TAG_RE.search(str(raw))
    if not match:
        return ""

    language, region = match.group(1).lower(), match.group(2)
    if not region:
        return language
    return f"{language}-{region.upper() if len(region) == 2 else region}"


_NAME_LANGUAGE_HINTS = (
    ("English (United States)", "en-US"),
    ("English (United Kingdom)", "en-GB"),
    ("English (Great Britain)", "en-GB"),
)


def voice_from_pyttsx3(raw_voice: Any, default_id: str | None) -> Voice:
    name = str(getattr(raw_voice, "name", "") or "")
    languages = getattr(raw_voice, "languages", None) or []
    tag = normalize_language_tag(languages[0]) if languages else ""
    if not tag:
        # SAPI5 voices usually report no languages, only a descriptive name.
        tag = next((hint for marker, hint in _NAME_LANGUAGE_HINTS if marker in name), "")
    return Voice(
        name=name,
        language_tag=tag,
        is_platform_default=raw_voice.id == default_id,
        id=raw_voice.id,
    )


class Pyttsx3SpeechEngine(SpeechOutputEngine):
    """Speaker playback on a worker thread using a local pyttsx3 engine instance."""

    def __init__(self, *, base_wpm: int = 200, logger: logging.Logger | None = None) -> None:
        try:
            import pyttsx3
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Speech output backend unavailable. Install extras with: pip install 'rudespeech[voice]'"
            ) from exc

        self._engine = pyttsx3.init()
        self._base_wpm = base_wpm
        self._default_voice_id = self._engine.getProperty("voice")
        self._logger = logger or logging.getLogger("rudespeech.voice.tts_pyttsx3")
        self._worker: threading.Thread | None = None
        self._speaking = threading.Event()
        self._voices_changed: list[Callable[[], None]] = []

    @property
    def speaking(self) -> bool:
        return self._speaking.is_set()

    def get_voices(self) -> list[Voice]:
        return [voice_from_pyttsx3(raw, self._default_voice_id) for raw in self._engine.getProperty("voices")]

    def on_voices_changed(self, callback: Callable[[], None]) -> None:
        # pyttsx3 enumerates voices synchronously, so this never fires.
        self._voices_changed.append(callback)

    def cancel(self) -> None:
        self._engine.stop()
        worker = self._worker
        if worker is not None and worker.is_alive() and worker is not threading.current_thread():
            worker.join(timeout=1.0)
        self._speaking.clear()

    def speak(self, utterance: Utterance) -> None:
        if utterance.voice is not None and utterance.voice.id:
            self._engine.setProperty("voice", utterance.voice.id)
        self._engine.setProperty("rate", int(self._base_wpm * utterance.rate))
        if utterance.pitch != 1.0:
            self._logger.debug("pitch_not_supported", extra={"pitch": utterance.pitch})

        self._speaking.set()
        self._worker = threading.Thread(target=self._play, args=(utterance.text,), name="tts-playback", daemon=True)
        self._worker.start()

    def _play(self, text: str) -> None:
        try:
            self._engine.say(text)
            self._engine.runAndWait()
        except Exception:  # noqa: BLE001 - playback runs detached from the caller.
            self._logger.exception("speech_playback_failed")
        finally:
            # A newer speak() owns the flag once it has replaced the worker.
            if self._worker is threading.current_thread():
                self._speaking.clear()
