"""Maps opaque remote failures onto the closed user-facing error taxonomy."""

from __future__ import annotations

import logging

from rudespeech import catalog
from rudespeech.gateway import RawFailure
from rudespeech.models import ClassifiedError, ErrorContext, ErrorKind

_INVALID_CREDENTIAL_MARKERS = ("api key not valid", "api_key_invalid", "invalid api key")
_QUOTA_MARKERS = ("429", "quota", "resource_exhausted", "rate limit")
_SAFETY_MARKERS = ("safety",)
_NETWORK_MARKERS = ("fetch", "connection", "network", "timed out")


class ErrorClassifier:
    """Best-effort string matching over ``RawFailure`` values.

    Matching is ordered: credential problems win over quota, quota over safety,
    safety over transport. Anything left over is ``UNKNOWN``.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("rudespeech.classifier")

    def classify(self, raw: RawFailure, context: ErrorContext) -> ClassifiedError:
        kind = self._match_kind(raw)
        reset = kind == ErrorKind.INVALID_CREDENTIAL and context == ErrorContext.CONVERSATION
        self._logger.info(
            "failure_classified",
            extra={"kind": kind.value, "context": context.value, "error_type": raw.error_type},
        )
        return ClassifiedError(kind=kind, message=catalog.REMOTE_ERRORS[context][kind], reset_session=reset)

    def not_available(self) -> ClassifiedError:
        return ClassifiedError(kind=ErrorKind.NOT_AVAILABLE, message=catalog.SPEECH_INPUT_UNAVAILABLE)

    def not_initialized(self) -> ClassifiedError:
        return ClassifiedError(kind=ErrorKind.NOT_INITIALIZED, message=catalog.CREDENTIAL_REQUIRED)

    def speech_input_failed(self, kind: str) -> ClassifiedError:
        """Message for a recognition failure reported with an engine error code."""
        return ClassifiedError(kind=ErrorKind.SPEECH_INPUT, message=catalog.speech_input_error(kind))

    def speech_input_start_failed(self) -> ClassifiedError:
        return ClassifiedError(kind=ErrorKind.SPEECH_INPUT, message=catalog.SPEECH_INPUT_START_FAILED)

    @staticmethod
    def _match_kind(raw: RawFailure) -> ErrorKind:
        text = raw.searchable_text().lower()
        if any(marker in text for marker in _INVALID_CREDENTIAL_MARKERS):
            return ErrorKind.INVALID_CREDENTIAL
        if raw.status_code == 429 or any(marker in text for marker in _QUOTA_MARKERS):
            return ErrorKind.QUOTA_EXCEEDED
        if (raw.block_reason or "").upper() == "SAFETY" or any(marker in text for marker in _SAFETY_MARKERS):
            return ErrorKind.SAFETY_BLOCKED
        if raw.transport or any(marker in text for marker in _NETWORK_MARKERS):
            return ErrorKind.NETWORK_FAILURE
        return ErrorKind.UNKNOWN
