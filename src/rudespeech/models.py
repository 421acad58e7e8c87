from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Phase(str, Enum):
    """Conversation session lifecycle states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    AWAITING_RESPONSE = "awaiting_response"
    RECORDING = "recording"


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ErrorKind(str, Enum):
    """Closed set of user-visible error kinds."""

    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    SAFETY_BLOCKED = "safety_blocked"
    NETWORK_FAILURE = "network_failure"
    UNKNOWN = "unknown"
    NOT_AVAILABLE = "not_available"
    NOT_INITIALIZED = "not_initialized"
    SPEECH_INPUT = "speech_input"


class ErrorContext(str, Enum):
    INITIALIZATION = "initialization"
    CONVERSATION = "conversation"


@dataclass(frozen=True, slots=True)
class Message:
    speaker: Speaker
    text: str


@dataclass(frozen=True, slots=True)
class Voice:
    """Playback voice as reported by a speech-output engine."""

    name: str
    language_tag: str
    is_platform_default: bool = False
    id: str | None = None


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    kind: ErrorKind
    message: str
    reset_session: bool = False


@dataclass(frozen=True, slots=True)
class CredentialResult:
    """Outcome of a credential submission, for the key entry surface."""

    accepted: bool
    error: str | None = None


@dataclass(slots=True)
class Session:
    """The single live conversation owned by the session controller."""

    phase: Phase = Phase.UNINITIALIZED
    credential: Any = None
    transcript: list[Message] = field(default_factory=list)
    active_error: ClassifiedError | None = None
    credential_error: str | None = None
    pending_input_text: str = ""

    @property
    def is_recording(self) -> bool:
        return self.phase == Phase.RECORDING

    @property
    def is_awaiting_response(self) -> bool:
        return self.phase == Phase.AWAITING_RESPONSE

    @property
    def is_busy(self) -> bool:
        return self.phase in (Phase.INITIALIZING, Phase.AWAITING_RESPONSE)

    def append(self, speaker: Speaker, text: str) -> Message:
        if not text.strip():
            raise ValueError("Transcript messages must not be empty")
        message = Message(speaker=speaker, text=text)
        self.transcript.append(message)
        return message

    def reset(self) -> None:
        """Drop the credential and return to key entry, keeping the transcript."""
        self.phase = Phase.UNINITIALIZED
        self.credential = None
