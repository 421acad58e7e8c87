"""Deterministic playback voice selection."""

from __future__ import annotations

from typing import Callable, Sequence

from rudespeech.models import Voice

PREFERRED_VOICE_NAMES: tuple[str, ...] = (
    "Microsoft David Desktop - English (United States)",
    "Google US English",
    "David",
    "Mark",
    "Alex",
)


def _is_english(voice: Voice) -> bool:
    return voice.language_tag.startswith("en")


_PRIORITY_CHAIN: tuple[Callable[[Voice], bool], ...] = (
    lambda voice: voice.name in PREFERRED_VOICE_NAMES and _is_english(voice),
    lambda voice: voice.language_tag == "en-US" and "male" in voice.name.lower(),
    lambda voice: voice.language_tag == "en-US",
    lambda voice: voice.language_tag == "en-GB",
    lambda voice: voice.is_platform_default and _is_english(voice),
    _is_english,
    lambda voice: voice.is_platform_default,
)


def select_voice(voices: Sequence[Voice]) -> Voice | None:
    """Return the first voice matched by the priority chain.

    Each rule scans the whole list before the next rule is tried. Returns
    ``None`` only for an empty list; a non-empty list with no rule match falls
    back to its first voice.
    """
    for rule in _PRIORITY_CHAIN:
        for voice in voices:
            if rule(voice):
                return voice
    return voices[0] if voices else None
