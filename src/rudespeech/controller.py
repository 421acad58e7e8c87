"""Conversation session controller.

Owns the single ``Session`` and serializes the three asynchronous
collaborators around it: speech capture, the remote generation call and
speech playback. All state changes happen on one event loop; the phase guard
is the only backpressure mechanism, so a second send while a reply is pending
is dropped rather than queued.
"""

from __future__ import annotations

import logging
from typing import Callable

from rudespeech import catalog
from rudespeech.classifier import ErrorClassifier
from rudespeech.events import EventChannel, SpeechEnded, SpeechFailed, SpeechInputEvent, SpeechRecognized
from rudespeech.gateway import RemoteCallError, RemoteCallGateway
from rudespeech.models import ClassifiedError, CredentialResult, ErrorContext, Phase, Session, Speaker
from rudespeech.voice.input import SpeechInputCoordinator
from rudespeech.voice.output import SpeechOutputCoordinator

SessionListener = Callable[[Session], None]


class SessionController:
    """Drives the uninitialized -> initializing -> ready <-> (awaiting response | recording) lifecycle."""

    def __init__(
        self,
        *,
        gateway: RemoteCallGateway,
        speech_output: SpeechOutputCoordinator,
        speech_input: SpeechInputCoordinator | None = None,
        classifier: ErrorClassifier | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._gateway = gateway
        self._speech_output = speech_output
        self._speech_input = speech_input or SpeechInputCoordinator(engine=None)
        self._classifier = classifier or ErrorClassifier()
        self._logger = logger or logging.getLogger("rudespeech.controller")
        self._session = Session()
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def speech_input_available(self) -> bool:
        return self._speech_input.available

    def subscribe(self, listener: SessionListener) -> None:
        """Call ``listener`` with the session after every state change."""
        self._listeners.append(listener)

    async def submit_credential(self, credential: str) -> CredentialResult:
        """Verify ``credential`` with one remote call and open the session on success."""
        session = self._session
        if session.phase != Phase.UNINITIALIZED:
            self._logger.info("credential_submission_ignored", extra={"phase": session.phase.value})
            return CredentialResult(accepted=session.credential is not None)

        key = credential.strip()
        if not key:
            session.credential_error = catalog.EMPTY_CREDENTIAL
            self._notify()
            return CredentialResult(accepted=False, error=catalog.EMPTY_CREDENTIAL)

        session.credential_error = None
        session.active_error = None
        self._transition(Phase.INITIALIZING)

        try:
            handle = await self._gateway.open(key)
        except RemoteCallError as exc:
            classified = self._classifier.classify(exc.raw, ErrorContext.INITIALIZATION)
            session.credential = None
            session.active_error = classified
            session.credential_error = classified.message
            self._transition(Phase.UNINITIALIZED)
            return CredentialResult(accepted=False, error=classified.message)

        session.credential = handle
        self._transition(Phase.READY)
        return CredentialResult(accepted=True)

    def update_draft(self, text: str) -> None:
        self._session.pending_input_text = text
        self._notify()

    async def send_text(self, text: str | None = None) -> bool:
        """Send ``text`` (or the current draft). Returns ``False`` when the send was rejected."""
        prompt = (self._session.pending_input_text if text is None else text).strip()
        if not prompt:
            return False
        if self._session.phase != Phase.READY:
            self._logger.info("send_rejected", extra={"phase": self._session.phase.value})
            return False

        await self._converse(prompt)
        return True

    def toggle_recording(self) -> None:
        session = self._session
        if session.phase == Phase.RECORDING:
            # The phase returns to READY when the engine reports the end of capture.
            self._speech_input.stop()
            return

        if not self._speech_input.available:
            self._set_error(self._classifier.not_available())
            return

        if session.phase == Phase.UNINITIALIZED:
            self._set_error(self._classifier.not_initialized(), speak=True)
            return

        if session.phase != Phase.READY:
            self._logger.info("recording_rejected", extra={"phase": session.phase.value})
            return

        session.active_error = None
        session.pending_input_text = ""
        try:
            self._speech_input.start()
        except Exception:  # noqa: BLE001 - engines may refuse to start in odd states.
            self._logger.exception("recording_start_failed")
            self._set_error(self._classifier.speech_input_start_failed())
            return

        self._transition(Phase.RECORDING)

    async def handle_event(self, event: SpeechInputEvent) -> None:
        """Apply one speech-input event to the session."""
        session = self._session
        if isinstance(event, SpeechEnded):
            if session.phase == Phase.RECORDING:
                self._transition(Phase.READY)
            return

        if session.phase != Phase.RECORDING:
            self._logger.info(
                "speech_event_ignored",
                extra={"event": type(event).__name__, "phase": session.phase.value},
            )
            return

        if isinstance(event, SpeechFailed):
            self._set_error(self._classifier.speech_input_failed(event.kind), speak=True)
            return

        if isinstance(event, SpeechRecognized):
            text = event.text.strip()
            if not text:
                self._logger.info("speech_recognized_empty")
                return
            self._transition(Phase.READY)
            await self._converse(text)

    async def run_events(self, channel: EventChannel) -> None:
        """Consume speech-input events one at a time until cancelled."""
        self._speech_input.bind(channel.post)
        while True:
            event = await channel.get()
            try:
                await self.handle_event(event)
            finally:
                channel.task_done()

    def shutdown(self) -> None:
        self._speech_input.stop()
        self._speech_output.shutdown()

    async def _converse(self, prompt: str) -> None:
        session = self._session
        session.append(Speaker.USER, prompt)
        session.pending_input_text = ""
        session.active_error = None
        self._transition(Phase.AWAITING_RESPONSE)

        try:
            result = await self._gateway.generate(session.credential, prompt)
        except RemoteCallError as exc:
            self._fail_conversation(exc)
            return

        reply = result.text if result.text is not None else catalog.empty_response_fallback(result.block_reason)
        session.append(Speaker.ASSISTANT, reply)
        self._transition(Phase.READY)
        self._speech_output.speak(reply)

    def _fail_conversation(self, exc: RemoteCallError) -> None:
        session = self._session
        classified = self._classifier.classify(exc.raw, ErrorContext.CONVERSATION)
        session.active_error = classified
        if classified.reset_session:
            session.credential_error = catalog.CREDENTIAL_INVALIDATED
            session.reset()
            self._logger.warning("session_reset", extra={"kind": classified.kind.value})
            self._notify()
        else:
            self._transition(Phase.READY)
        self._speech_output.speak(classified.message)

    def _set_error(self, error: ClassifiedError, *, speak: bool = False) -> None:
        self._session.active_error = error
        self._notify()
        if speak:
            self._speech_output.speak(error.message)

    def _transition(self, phase: Phase) -> None:
        previous = self._session.phase
        self._session.phase = phase
        self._logger.debug("phase_changed", extra={"from_phase": previous.value, "to_phase": phase.value})
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._session)
            except Exception:  # noqa: BLE001 - a broken view must not break the session.
                self._logger.exception("session_listener_failed")
