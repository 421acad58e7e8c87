from __future__ import annotations

import asyncio

import httpx
import pytest

from rudespeech.gateway import (
    GenerationResult,
    ModelResponse,
    NotInitializedError,
    RawFailure,
    RemoteCallError,
    RemoteCallGateway,
)


class StubClient:
    def __init__(self, response: ModelResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or ModelResponse(text="Ugh.")
        self.error = error
        self.prompts: list[str] = []

    def generate_content(self, prompt: str) -> ModelResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class FakeApiError(Exception):
    def __init__(self, code: int, status: str, message: str) -> None:
        super().__init__(f"{code} {status}. {message}")
        self.code = code
        self.status = status
        self.message = message


def test_open_runs_one_verification_call() -> None:
    client = StubClient()
    gateway = RemoteCallGateway(lambda key: client, verification_prompt="test prompt")

    handle = asyncio.run(gateway.open("key"))

    assert handle is client
    assert client.prompts == ["test prompt"]


def test_open_wraps_factory_failures() -> None:
    def _factory(key: str):
        raise ValueError("Missing key inputs argument!")

    gateway = RemoteCallGateway(_factory)

    with pytest.raises(RemoteCallError) as info:
        asyncio.run(gateway.open("key"))
    assert info.value.raw.error_type == "ValueError"


def test_generate_without_handle_is_a_usage_error() -> None:
    gateway = RemoteCallGateway(lambda key: StubClient())

    with pytest.raises(NotInitializedError):
        asyncio.run(gateway.generate(None, "hello"))


def test_generate_issues_exactly_one_call() -> None:
    client = StubClient(ModelResponse(text="Go away."))
    gateway = RemoteCallGateway(lambda key: client)

    result = asyncio.run(gateway.generate(client, "hello"))

    assert result == GenerationResult(text="Go away.", block_reason=None)
    assert client.prompts == ["hello"]


def test_blank_text_becomes_empty_result_with_block_reason() -> None:
    client = StubClient(ModelResponse(text="  \n", block_reason="SAFETY"))
    gateway = RemoteCallGateway(lambda key: client)

    result = asyncio.run(gateway.generate(client, "hello"))

    assert result.is_empty
    assert result.block_reason == "SAFETY"


def test_failures_are_captured_as_raw_failures_without_retry() -> None:
    client = StubClient(error=httpx.ConnectError("connection refused"))
    gateway = RemoteCallGateway(lambda key: client)

    with pytest.raises(RemoteCallError) as info:
        asyncio.run(gateway.generate(client, "hello"))

    assert client.prompts == ["hello"]
    assert info.value.raw.transport is True
    assert info.value.raw.error_type == "ConnectError"


def test_raw_failure_reads_api_error_attributes() -> None:
    raw = RawFailure.from_exception(FakeApiError(429, "RESOURCE_EXHAUSTED", "Quota exceeded for metric"))

    assert raw.status_code == 429
    assert raw.status == "RESOURCE_EXHAUSTED"
    assert raw.message == "Quota exceeded for metric"
    assert raw.transport is False
    assert "429" in raw.searchable_text()
