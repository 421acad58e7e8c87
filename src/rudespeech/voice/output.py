"""Text-to-speech orchestration for spoken assistant replies."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rudespeech.models import Voice

from .interfaces import SpeechOutputEngine, Utterance
from .selector import select_voice


@dataclass(slots=True)
class SpeechOutputConfig:
    """Fixed prosody applied to every utterance."""

    enabled: bool = True
    pitch: float = 0.9
    rate: float = 1.0


class SpeechOutputCoordinator:
    """Sole mutator of the speech-output engine; at most one utterance is ever audible.

    Speech is best-effort: engine failures are logged and never raised.
    """

    def __init__(
        self,
        engine: SpeechOutputEngine | None,
        config: SpeechOutputConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._config = config or SpeechOutputConfig()
        self._logger = logger or logging.getLogger("rudespeech.voice.output")
        self._voice: Voice | None = None
        self._voice_resolved = False
        self._voices_listener_registered = False

        if self._engine is not None:
            self._resolve_voice()

    @property
    def voice(self) -> Voice | None:
        """Voice chosen for playback, ``None`` while the engine default is used."""
        return self._voice

    @property
    def available(self) -> bool:
        return self._engine is not None and self._config.enabled

    def speak(self, text: str) -> Utterance | None:
        """Cancel whatever is playing, then speak ``text``. Blank text is ignored."""
        if not self.available or not text or not text.strip():
            return None

        try:
            if self._engine.speaking:
                self._logger.debug("speech_cancelled_for_new_utterance")
                self._engine.cancel()

            utterance = Utterance(
                text=text,
                voice=self._voice,
                pitch=self._config.pitch,
                rate=self._config.rate,
            )
            self._engine.speak(utterance)
            return utterance
        except Exception:  # noqa: BLE001 - speech failures never reach the session.
            self._logger.exception("speech_synthesis_failed", extra={"text_chars": len(text)})
            return None

    def shutdown(self) -> None:
        if self._engine is None:
            return
        try:
            if self._engine.speaking:
                self._engine.cancel()
        except Exception:  # noqa: BLE001
            self._logger.exception("speech_shutdown_failed")

    def _resolve_voice(self) -> None:
        if self._voice_resolved:
            return

        try:
            voices = list(self._engine.get_voices())
        except Exception:  # noqa: BLE001
            self._logger.exception("voice_catalog_unavailable")
            voices = []

        chosen = select_voice(voices)
        if chosen is not None:
            self._voice = chosen
            self._voice_resolved = True
            self._logger.info(
                "voice_selected",
                extra={"voice_name": chosen.name, "language_tag": chosen.language_tag},
            )
            return

        # Voice catalogs may load lazily; retry once the engine says they changed.
        if not self._voices_listener_registered:
            self._voices_listener_registered = True
            self._engine.on_voices_changed(self._resolve_voice)
            self._logger.info("voice_selection_deferred")
