import pytest

from rudespeech.events import SpeechEnded, SpeechFailed, SpeechRecognized
from rudespeech.voice.input import NotAvailableError, RecognitionConfig, SpeechInputCoordinator


class StubRecognitionEngine:
    def __init__(self) -> None:
        self.on_result = None
        self.on_error = None
        self.on_end = None
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1


def test_start_without_engine_raises_not_available() -> None:
    coordinator = SpeechInputCoordinator(engine=None)

    with pytest.raises(NotAvailableError):
        coordinator.start()
    assert coordinator.available is False


def test_stop_when_inactive_is_a_noop() -> None:
    engine = StubRecognitionEngine()
    coordinator = SpeechInputCoordinator(engine)

    coordinator.stop()
    SpeechInputCoordinator(None).stop()

    assert engine.stops == 0


def test_engine_callbacks_become_events_and_end_clears_active() -> None:
    engine = StubRecognitionEngine()
    events = []
    coordinator = SpeechInputCoordinator(engine, sink=events.append)

    coordinator.start()
    assert coordinator.active is True
    engine.on_result("  hello there ")
    engine.on_end()

    assert events == [SpeechRecognized(text="hello there"), SpeechEnded()]
    assert coordinator.active is False

    coordinator.start()
    coordinator.stop()
    engine.on_error("no-speech")
    engine.on_end()

    assert engine.stops == 1
    assert events[2:] == [SpeechFailed(kind="no-speech"), SpeechEnded()]


def test_recognition_defaults_match_single_shot_capture() -> None:
    config = RecognitionConfig()

    assert config.continuous is False
    assert config.interim_results is False
    assert config.max_alternatives == 1
    assert config.language == "en-US"


class SynchronousEndEngine(StubRecognitionEngine):
    def start(self) -> None:
        super().start()
        self.on_error("audio-capture")
        self.on_end()


class BrokenStartEngine(StubRecognitionEngine):
    def start(self) -> None:
        raise RuntimeError("microphone busy")


def test_end_reported_inside_start_leaves_coordinator_inactive() -> None:
    events = []
    coordinator = SpeechInputCoordinator(SynchronousEndEngine(), sink=events.append)

    coordinator.start()

    assert coordinator.active is False
    assert events == [SpeechFailed(kind="audio-capture"), SpeechEnded()]


def test_failed_engine_start_does_not_mark_capture_active() -> None:
    engine = BrokenStartEngine()
    coordinator = SpeechInputCoordinator(engine)

    with pytest.raises(RuntimeError, match="microphone busy"):
        coordinator.start()

    assert coordinator.active is False
    coordinator.stop()
    assert engine.stops == 0
