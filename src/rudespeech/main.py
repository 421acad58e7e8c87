"""CLI startup entrypoint for RudeSpeech."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import asdict

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from rudespeech import catalog
from rudespeech.config import settings
from rudespeech.controller import SessionController
from rudespeech.events import EventChannel
from rudespeech.gateway import RemoteCallGateway
from rudespeech.gemini import GeminiClient
from rudespeech.models import Phase, Session, Speaker
from rudespeech.telemetry import configure_logging
from rudespeech.voice import (
    RecognitionConfig,
    SpeechInputCoordinator,
    SpeechOutputConfig,
    SpeechOutputCoordinator,
    select_voice,
)

app = typer.Typer(help="RudeSpeech voice chat entrypoint")

_BACKEND_ERRORS = (RuntimeError, ImportError, OSError)

_BUSY_HINT = "Not now. Wait your turn."
_RECORDING_HINT = "Still listening. /mic stops it."

_PHASE_INDICATORS = {
    Phase.INITIALIZING: catalog.INITIALIZING,
    Phase.AWAITING_RESPONSE: catalog.THINKING,
    Phase.RECORDING: catalog.LISTENING,
}


class _TranscriptView:
    """Renders transcript growth, new errors and loading indicators to the console."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._shown = 0
        self._error = None
        self._phase: Phase | None = None

    def render(self, session: Session) -> None:
        for message in session.transcript[self._shown :]:
            label = "[cyan]you>[/]" if message.speaker == Speaker.USER else "[bold red]bot>[/]"
            self._console.print(f"{label} {escape(message.text)}")
        self._shown = len(session.transcript)

        if session.active_error is not None and session.active_error is not self._error:
            self._console.print(f"[red]{escape(session.active_error.message)}[/]")
        self._error = session.active_error

        if session.phase != self._phase:
            indicator = _PHASE_INDICATORS.get(session.phase)
            if indicator:
                self._console.print(f"[dim]{escape(indicator)}[/]")
            self._phase = session.phase


def _build_gateway() -> RemoteCallGateway:
    def _client_factory(api_key: str) -> GeminiClient:
        return GeminiClient(api_key, model_name=settings.model_name, system_prompt=settings.system_prompt)

    return RemoteCallGateway(_client_factory, verification_prompt=settings.verification_prompt)


def _build_speech_output(enabled: bool) -> SpeechOutputCoordinator:
    engine = None
    if enabled and settings.voice_enabled:
        try:
            from rudespeech.voice.tts_pyttsx3 import Pyttsx3SpeechEngine

            engine = Pyttsx3SpeechEngine(base_wpm=settings.voice_base_wpm)
        except _BACKEND_ERRORS as exc:
            print({"warning": str(exc)})
    config = SpeechOutputConfig(enabled=enabled, pitch=settings.voice_pitch, rate=settings.voice_rate)
    return SpeechOutputCoordinator(engine, config)


def _build_speech_input(enabled: bool) -> SpeechInputCoordinator:
    engine = None
    if enabled and settings.microphone_enabled:
        try:
            from rudespeech.voice.stt_speechrecognition import SpeechRecognitionEngine

            engine = SpeechRecognitionEngine(
                RecognitionConfig(language=settings.speech_language),
                timeout=settings.listen_timeout_seconds,
                phrase_time_limit=settings.phrase_time_limit_seconds,
            )
        except _BACKEND_ERRORS as exc:
            print({"warning": str(exc)})
    return SpeechInputCoordinator(engine)


async def _enter_credential(controller: SessionController, console: Console) -> bool:
    console.print(f"[bold]{escape(catalog.KEY_PROMPT)}[/]")
    console.print(f"[dim]{escape(catalog.KEY_HINT)}[/]")
    while controller.session.phase == Phase.UNINITIALIZED:
        try:
            key = await asyncio.to_thread(typer.prompt, "API key", default="", show_default=False, hide_input=True)
        except typer.Abort:
            return False

        result = await controller.submit_credential(key)
        if not result.accepted:
            console.print(f"[red]{escape(result.error or catalog.EMPTY_CREDENTIAL)}[/]")

    if not controller.session.transcript:
        console.print(f"[bold red]bot>[/] {escape(catalog.GREETING)}")
    return True


async def _send_line(controller: SessionController, line: str, console: Console) -> None:
    controller.update_draft(line)
    if await controller.send_text():
        return

    controller.update_draft("")
    session = controller.session
    if session.is_busy:
        console.print(f"[dim]{escape(_BUSY_HINT)}[/]")
    elif session.is_recording:
        console.print(f"[dim]{escape(_RECORDING_HINT)}[/]")


async def _chat(*, voice: bool, microphone: bool, console: Console) -> None:
    controller = SessionController(
        gateway=_build_gateway(),
        speech_output=_build_speech_output(voice),
        speech_input=_build_speech_input(microphone),
    )
    controller.subscribe(_TranscriptView(console).render)
    events = asyncio.create_task(controller.run_events(EventChannel()), name="speech-input-events")

    hint = "Type and press Enter. /mic toggles listening, /quit exits."
    if not controller.speech_input_available:
        hint = "Type and press Enter. /quit exits."

    try:
        while True:
            if controller.session.phase == Phase.UNINITIALIZED:
                if not await _enter_credential(controller, console):
                    break
                console.print(f"[dim]{hint}[/]")

            try:
                line = await asyncio.to_thread(console.input, "> ")
            except (EOFError, KeyboardInterrupt):
                break

            command = line.strip()
            if command == "/quit":
                break
            if command == "/mic":
                controller.toggle_recording()
                continue

            await _send_line(controller, line, console)
    finally:
        controller.shutdown()
        events.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await events


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "model_name": settings.model_name,
            "speech_language": settings.speech_language,
            "voice_enabled": settings.voice_enabled,
            "microphone_enabled": settings.microphone_enabled,
            "voice_pitch": settings.voice_pitch,
            "voice_rate": settings.voice_rate,
        }
    )


@app.command()
def voices() -> None:
    """List speech-output voices and the one that would be used."""
    try:
        from rudespeech.voice.tts_pyttsx3 import Pyttsx3SpeechEngine

        engine = Pyttsx3SpeechEngine(base_wpm=settings.voice_base_wpm)
    except _BACKEND_ERRORS as exc:
        typer.echo(f"error: {exc}")
        raise typer.Exit(code=1)

    available = engine.get_voices()
    chosen = select_voice(available)
    print({"voices": [asdict(voice) for voice in available], "selected": chosen.name if chosen else None})


@app.command()
def chat(
    no_voice: bool = typer.Option(False, "--no-voice", help="Do not speak replies"),
    no_mic: bool = typer.Option(False, "--no-mic", help="Disable speech input"),
) -> None:
    """Run the interactive chat loop."""
    configure_logging(settings.log_level)
    asyncio.run(_chat(voice=not no_voice, microphone=not no_mic, console=Console()))


if __name__ == "__main__":
    app()
