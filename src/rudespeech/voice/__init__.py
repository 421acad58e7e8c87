"""Voice input and output module boundaries."""

from .input import NotAvailableError, RecognitionConfig, SpeechInputCoordinator
from .interfaces import SpeechInputEngine, SpeechOutputEngine, Utterance
from .output import SpeechOutputConfig, SpeechOutputCoordinator
from .selector import PREFERRED_VOICE_NAMES, select_voice

__all__ = [
    "NotAvailableError",
    "PREFERRED_VOICE_NAMES",
    "RecognitionConfig",
    "SpeechInputCoordinator",
    "SpeechInputEngine",
    "SpeechOutputConfig",
    "SpeechOutputCoordinator",
    "SpeechOutputEngine",
    "Utterance",
    "select_voice",
]
