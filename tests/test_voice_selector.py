from __future__ import annotations

from rudespeech.models import Voice
from rudespeech.voice.selector import select_voice


def test_empty_catalog_selects_nothing() -> None:
    assert select_voice([]) is None


def test_preferred_name_needs_english_tag() -> None:
    voices = [
        Voice(name="Alex", language_tag="de-DE"),
        Voice(name="Samantha", language_tag="en-US"),
        Voice(name="Alex", language_tag="en-US"),
    ]

    assert select_voice(voices) is voices[2]


def test_us_male_voice_beats_other_us_voices() -> None:
    voices = [
        Voice(name="Zira", language_tag="en-US"),
        Voice(name="English Male", language_tag="en-US"),
    ]

    assert select_voice(voices).name == "English Male"


def test_us_voice_beats_british_voice() -> None:
    voices = [Voice(name="Daniel", language_tag="en-GB"), Voice(name="Zira", language_tag="en-US")]

    assert select_voice(voices).name == "Zira"


def test_british_voice_beats_english_default() -> None:
    voices = [
        Voice(name="Karen", language_tag="en-AU", is_platform_default=True),
        Voice(name="Daniel", language_tag="en-GB"),
    ]

    assert select_voice(voices).name == "Daniel"


def test_english_default_beats_other_english() -> None:
    voices = [
        Voice(name="Moira", language_tag="en-IE"),
        Voice(name="Karen", language_tag="en-AU", is_platform_default=True),
    ]

    assert select_voice(voices).name == "Karen"


def test_any_english_voice_beats_non_english_default() -> None:
    voices = [
        Voice(name="Amelie", language_tag="fr-CA", is_platform_default=True),
        Voice(name="Moira", language_tag="en-IE"),
    ]

    assert select_voice(voices).name == "Moira"


def test_non_english_catalog_falls_back_to_platform_default_then_first() -> None:
    with_default = [Voice(name="Anna", language_tag="de-DE"), Voice(name="Amelie", language_tag="fr-CA", is_platform_default=True)]
    without_default = [Voice(name="Anna", language_tag="de-DE"), Voice(name="Amelie", language_tag="fr-CA")]

    assert select_voice(with_default).name == "Amelie"
    assert select_voice(without_default).name == "Anna"


def test_selection_is_deterministic() -> None:
    voices = [
        Voice(name="Daniel", language_tag="en-GB"),
        Voice(name="Zira", language_tag="en-US"),
        Voice(name="David", language_tag="en-US"),
    ]

    assert {select_voice(voices) for _ in range(5)} == {voices[2]}
