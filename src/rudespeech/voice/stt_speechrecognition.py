"""Speech-input engine powered by ``speech_recognition``."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .input import RecognitionConfig
from .interfaces import SpeechInputEngine


class SpeechRecognitionEngine(SpeechInputEngine):
    """One microphone capture per ``start()``, transcribed with the Google web recognizer.

    Failures are reported with browser-style codes: ``no-speech``,
    ``audio-capture``, ``network`` and ``aborted``.
    """

    def __init__(
        self,
        config: RecognitionConfig | None = None,
        *,
        timeout: float | None = 5.0,
        phrase_time_limit: float | None = 8.0,
        sample_rate: int = 16_000,
        chunk_size: int = 1024,
        adjust_noise_seconds: float = 0.2,
        logger: logging.Logger | None = None,
    ) -> None:
        try:
            import speech_recognition as sr
        except ImportError as exc:  # pragma: no cover - import guard
            raise RuntimeError(
                "Speech input backend unavailable. Install extras with: pip install 'rudespeech[voice]'"
            ) from exc

        self._sr = sr
        self._config = config or RecognitionConfig()
        self._recognizer = sr.Recognizer()
        try:
            self._microphone = sr.Microphone(sample_rate=sample_rate, chunk_size=chunk_size)
        except (AttributeError, OSError) as exc:
            raise RuntimeError(
                "Microphone backend unavailable. Install extras with: pip install 'rudespeech[voice]'"
            ) from exc

        self._timeout = timeout
        self._phrase_time_limit = phrase_time_limit
        self._adjust_noise_seconds = max(0.0, adjust_noise_seconds)
        self._logger = logger or logging.getLogger("rudespeech.voice.stt_speechrecognition")
        self._worker: threading.Thread | None = None
        self._stop_requested = threading.Event()

        self.on_result: Callable[[str], None] | None = None
        self.on_error: Callable[[str], None] | None = None
        self.on_end: Callable[[], None] | None = None

    @property
    def config(self) -> RecognitionConfig:
        return self._config

    def start(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            raise RuntimeError("Speech recognition has already started")

        self._stop_requested.clear()
        self._worker = threading.Thread(target=self._capture, name="stt-capture", daemon=True)
        self._worker.start()

    def stop(self) -> None:
        self._stop_requested.set()

    def _capture(self) -> None:
        sr = self._sr
        try:
            with self._microphone as source:
                if self._adjust_noise_seconds > 0:
                    self._recognizer.adjust_for_ambient_noise(source, duration=self._adjust_noise_seconds)
                audio = self._recognizer.listen(
                    source,
                    timeout=self._timeout,
                    phrase_time_limit=self._phrase_time_limit,
                )

            if self._stop_requested.is_set():
                self._fire_error("aborted")
                return

            transcript = self._recognizer.recognize_google(audio, language=self._config.language)
            if self.on_result is not None:
                self.on_result(transcript)
        except sr.WaitTimeoutError:
            self._fire_error("no-speech")
        except sr.UnknownValueError:
            self._fire_error("no-speech")
        except sr.RequestError:
            self._logger.exception("speech_recognition_request_failed")
            self._fire_error("network")
        except OSError:
            self._logger.exception("microphone_capture_failed")
            self._fire_error("audio-capture")
        finally:
            if self.on_end is not None:
                self.on_end()

    def _fire_error(self, kind: str) -> None:
        # A user stop wins over whatever the interrupted listen reported.
        if self._stop_requested.is_set():
            kind = "aborted"
        if self.on_error is not None:
            self.on_error(kind)
