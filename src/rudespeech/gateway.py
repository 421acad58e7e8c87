"""Sole call site for the remote text-generation service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Protocol

import httpx


class NotInitializedError(RuntimeError):
    """Raised when a generation call is attempted without a verified client handle."""


@dataclass(frozen=True, slots=True)
class ModelResponse:
    """Normalized response surface of a generation client."""

    text: str | None
    block_reason: str | None = None


class GenerativeClient(Protocol):
    """Remote generation client constructed from a credential string."""

    def generate_content(self, prompt: str) -> ModelResponse:
        """Run one generation request and return its normalized response."""


@dataclass(frozen=True, slots=True)
class RawFailure:
    """Failure captured at the gateway boundary, before classification."""

    message: str
    error_type: str
    status_code: int | None = None
    status: str | None = None
    block_reason: str | None = None
    transport: bool = False

    @classmethod
    def from_exception(cls, exc: BaseException) -> RawFailure:
        code = getattr(exc, "code", None)
        status = getattr(exc, "status", None)
        return cls(
            message=str(getattr(exc, "message", None) or exc),
            error_type=type(exc).__name__,
            status_code=code if isinstance(code, int) else None,
            status=str(status) if status else None,
            block_reason=getattr(exc, "block_reason", None),
            transport=isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError)),
        )

    def searchable_text(self) -> str:
        parts = [self.message, self.status or "", self.error_type]
        if self.status_code is not None:
            parts.append(str(self.status_code))
        return " ".join(part for part in parts if part)


class RemoteCallError(Exception):
    """Wraps a ``RawFailure`` raised out of the gateway."""

    def __init__(self, raw: RawFailure) -> None:
        super().__init__(raw.message)
        self.raw = raw


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Successful call. ``text`` is ``None`` when the model produced nothing usable."""

    text: str | None
    block_reason: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.text is None


class RemoteCallGateway:
    """Issues exactly one remote call per invocation; never retries or times out."""

    def __init__(
        self,
        client_factory: Callable[[str], GenerativeClient],
        *,
        verification_prompt: str = "test prompt",
        logger: logging.Logger | None = None,
    ) -> None:
        self._client_factory = client_factory
        self._verification_prompt = verification_prompt
        self._logger = logger or logging.getLogger("rudespeech.gateway")

    async def open(self, credential: str) -> GenerativeClient:
        """Build a client for ``credential`` and prove it works with one verification call."""
        try:
            client = self._client_factory(credential)
        except Exception as exc:  # noqa: BLE001 - client construction failures are remote failures too.
            self._logger.warning("client_construction_failed", extra={"error_type": type(exc).__name__})
            raise RemoteCallError(RawFailure.from_exception(exc)) from exc

        await self.generate(client, self._verification_prompt)
        self._logger.info("client_verified")
        return client

    async def generate(self, client: GenerativeClient | None, prompt: str) -> GenerationResult:
        if client is None:
            raise NotInitializedError("Generation client is not initialized; submit a credential first")

        self._logger.info("generation_requested", extra={"prompt_chars": len(prompt)})
        try:
            response = await asyncio.to_thread(client.generate_content, prompt)
        except Exception as exc:  # noqa: BLE001 - every remote failure is surfaced as RawFailure.
            raw = RawFailure.from_exception(exc)
            self._logger.warning(
                "generation_failed",
                extra={"error_type": raw.error_type, "status_code": raw.status_code, "transport": raw.transport},
            )
            raise RemoteCallError(raw) from exc

        text = response.text if response.text and response.text.strip() else None
        if text is None:
            self._logger.warning("generation_empty", extra={"block_reason": response.block_reason})
        return GenerationResult(text=text, block_reason=response.block_reason)
