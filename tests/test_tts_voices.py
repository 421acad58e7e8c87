from __future__ import annotations

import sys
import threading
import types

import pytest

from rudespeech.voice.interfaces import Utterance
from rudespeech.voice.tts_pyttsx3 import Pyttsx3SpeechEngine, normalize_language_tag, voice_from_pyttsx3


@pytest.mark.parametrize(
    ("raw", "tag"),
    [
        ("en_US", "en-US"),
        ("en-gb", "en-GB"),
        (b"\x05en-us", "en-US"),
        ("en", "en"),
        (None, ""),
        ("", ""),
    ],
)
def test_language_tags_are_normalized(raw, tag: str) -> None:
    assert normalize_language_tag(raw) == tag


def test_pyttsx3_voice_mapping_marks_platform_default() -> None:
    raw = types.SimpleNamespace(id="HKEY\\David", name="Microsoft David Desktop", languages=["en_US"])
    other = types.SimpleNamespace(id="espeak/fr", name="french", languages=[])

    voice = voice_from_pyttsx3(raw, default_id="HKEY\\David")
    foreign = voice_from_pyttsx3(other, default_id="HKEY\\David")

    assert voice.is_platform_default is True
    assert voice.language_tag == "en-US"
    assert voice.id == "HKEY\\David"
    assert foreign.is_platform_default is False
    assert foreign.language_tag == ""


def test_sapi_voice_language_is_inferred_from_name() -> None:
    raw = types.SimpleNamespace(id="TTS_MS_EN-US_DAVID", name="Microsoft David Desktop - English (United States)", languages=[])

    assert voice_from_pyttsx3(raw, default_id=None).language_tag == "en-US"


class _GatedPyttsx3Engine:
    """Fake pyttsx3 driver whose ``runAndWait`` blocks until the test releases it."""

    def __init__(self) -> None:
        self.properties = {"voice": "default-voice", "voices": []}
        self.gates: list[threading.Event] = []
        self.entered = threading.Semaphore(0)

    def getProperty(self, name: str):
        return self.properties[name]

    def setProperty(self, name: str, value) -> None:
        self.properties[name] = value

    def say(self, text: str) -> None:
        return None

    def runAndWait(self) -> None:
        gate = threading.Event()
        self.gates.append(gate)
        self.entered.release()
        gate.wait(timeout=5)

    def stop(self) -> None:
        return None


def test_finished_old_playback_does_not_clear_newer_speaking_flag(monkeypatch) -> None:
    driver = _GatedPyttsx3Engine()
    fake_pyttsx3 = types.ModuleType("pyttsx3")
    fake_pyttsx3.init = lambda: driver
    monkeypatch.setitem(sys.modules, "pyttsx3", fake_pyttsx3)
    engine = Pyttsx3SpeechEngine()

    engine.speak(Utterance(text="first", voice=None, pitch=1.0, rate=1.0))
    first = engine._worker
    assert driver.entered.acquire(timeout=5)
    engine.speak(Utterance(text="second", voice=None, pitch=1.0, rate=1.0))
    second = engine._worker
    assert driver.entered.acquire(timeout=5)

    driver.gates[0].set()
    first.join(timeout=5)
    assert engine.speaking is True

    driver.gates[1].set()
    second.join(timeout=5)
    assert engine.speaking is False
