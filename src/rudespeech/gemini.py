"""Remote generation client backed by the ``google-genai`` SDK."""

from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types

from rudespeech.gateway import ModelResponse

SAFETY_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)
SAFETY_THRESHOLD = types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE

_UNSPECIFIED_REASONS = {"BLOCKED_REASON_UNSPECIFIED", "FINISH_REASON_UNSPECIFIED", "STOP"}


def build_safety_settings() -> list[types.SafetySetting]:
    return [types.SafetySetting(category=category, threshold=SAFETY_THRESHOLD) for category in SAFETY_CATEGORIES]


class GeminiClient:
    """Stateless single-turn client; every call is an independent one-message exchange."""

    def __init__(self, api_key: str, *, model_name: str, system_prompt: str, client: Any | None = None) -> None:
        self._client = client or genai.Client(api_key=api_key)
        self._model_name = model_name
        self._config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            safety_settings=build_safety_settings(),
        )

    def generate_content(self, prompt: str) -> ModelResponse:
        response = self._client.models.generate_content(
            model=self._model_name,
            contents=prompt,
            config=self._config,
        )
        return ModelResponse(text=response.text, block_reason=extract_block_reason(response))


def extract_block_reason(response: Any) -> str | None:
    """Prompt-level block reason first, then the first candidate's finish reason."""
    feedback = getattr(response, "prompt_feedback", None)
    reason = _reason_name(getattr(feedback, "block_reason", None))
    if reason:
        return reason

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        return _reason_name(getattr(candidates[0], "finish_reason", None))
    return None


def _reason_name(reason: Any) -> str | None:
    if reason is None:
        return None
    name = getattr(reason, "name", None) or str(reason)
    name = name.rsplit(".", 1)[-1].upper()
    if name in _UNSPECIFIED_REASONS:
        return None
    return name
