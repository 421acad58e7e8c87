"""User-facing phrases. Every string here is shown or spoken verbatim."""

from __future__ import annotations

from rudespeech.models import ErrorContext, ErrorKind

CONVERSATION_ERRORS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CREDENTIAL: "Your API Key stopped working mid-conversation. Impressive incompetence. Fix it.",
    ErrorKind.QUOTA_EXCEEDED: "Looks like you used up your freebies or hit a limit. Tough luck.",
    ErrorKind.SAFETY_BLOCKED: "Seriously? You expect me to respond to *that*? Get lost.",
    ErrorKind.NETWORK_FAILURE: "Network crapped out. Or maybe the server just hates you.",
    ErrorKind.UNKNOWN: "Ugh, something broke. Probably you again. Try later, or don't.",
}

INITIALIZATION_ERRORS: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CREDENTIAL: "Your API Key is not valid. Please check it and try again.",
    ErrorKind.QUOTA_EXCEEDED: "You've exceeded your API quota. Check your Google AI Studio dashboard.",
    ErrorKind.SAFETY_BLOCKED: "Initialization failed. Check your API Key and console.",
    ErrorKind.NETWORK_FAILURE: "Network error during initialization. Check your connection.",
    ErrorKind.UNKNOWN: "Initialization failed. Check your API Key and console.",
}

REMOTE_ERRORS: dict[ErrorContext, dict[ErrorKind, str]] = {
    ErrorContext.CONVERSATION: CONVERSATION_ERRORS,
    ErrorContext.INITIALIZATION: INITIALIZATION_ERRORS,
}

EMPTY_CREDENTIAL = "API Key cannot be empty."
CREDENTIAL_INVALIDATED = "API Key became invalid during use."
CREDENTIAL_REQUIRED = "Submit your API Key first, genius."

EMPTY_RESPONSE_FALLBACKS: dict[str, str] = {
    "SAFETY": "Tch. Can't say that. Too sensitive for this world, huh?",
    "OTHER": "Something weird happened. Don't care enough to figure it out.",
}
EMPTY_RESPONSE_DEFAULT = "Whatever. I got nothing. Probably your fault."

SPEECH_INPUT_UNAVAILABLE = "Speech recognition isn't supported here. Too bad."
SPEECH_INPUT_START_FAILED = "Couldn't start recording. Try clicking again, maybe?"
SPEECH_INPUT_ERRORS: dict[str, str] = {
    "no-speech": "Didn't hear anything useful. Waste of time.",
    "audio-capture": "Can't hear you over your own incompetence. Check the mic.",
    "not-allowed": "Mic access denied. Scared? Or just stupid?",
    "network": "Network error during speech recognition. How typical.",
    "aborted": "You stopped listening. Fine by me.",
}
SPEECH_INPUT_OTHER = "Speech error: {kind}. Don't care what it means."

GREETING = "Alright, key works.Miracles happen, Now what do you want? Use the mic or type. Hurry up."
KEY_PROMPT = "Enter Your Gemini API Key,its free Idiot"
KEY_HINT = (
    "Get your key from Google AI Studio. Your key stays on this machine and is only used to talk to Google. "
    "Don't share it, obviously. (And no, I'm not storing it, you knew that already.)"
)
INITIALIZING = "Initializing... Patience is not my virtue."
THINKING = "Thinking requires effort... Ugh."
LISTENING = "Listening... Speak clearly, numbskull."


def empty_response_fallback(block_reason: str | None) -> str:
    """Pick the canned reply used when the model produced no text."""
    if block_reason is None:
        return EMPTY_RESPONSE_DEFAULT
    return EMPTY_RESPONSE_FALLBACKS.get(block_reason.upper(), EMPTY_RESPONSE_DEFAULT)


def speech_input_error(kind: str) -> str:
    return SPEECH_INPUT_ERRORS.get(kind, SPEECH_INPUT_OTHER.format(kind=kind))
