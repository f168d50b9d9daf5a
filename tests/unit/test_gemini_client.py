"""Tests for the Gemini model client adapter."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

from google.genai import types

from payloadbench.core.gemini import SERIALIZE_ERROR, GeminiModelClient, capture_raw_response
from payloadbench.protocols import ModelClient


class FakeModels:
    """Stand-in for ``client.aio.models`` returning real SDK response types."""

    def __init__(self, text: str = "Trends look good.", usage: bool = True):
        self._text = text
        self._usage = usage
        self.requests: list[dict[str, Any]] = []

    async def count_tokens(self, model: str, contents: Any) -> types.CountTokensResponse:
        self.requests.append({"op": "count_tokens", "model": model, "contents": contents})
        return types.CountTokensResponse(total_tokens=42)

    async def generate_content(
        self, model: str, contents: Any, config: Any
    ) -> types.GenerateContentResponse:
        self.requests.append(
            {"op": "generate_content", "model": model, "contents": contents, "config": config}
        )
        usage = (
            types.GenerateContentResponseUsageMetadata(prompt_token_count=10, total_token_count=30)
            if self._usage
            else None
        )
        return types.GenerateContentResponse(
            candidates=[
                types.Candidate(
                    content=types.Content(role="model", parts=[types.Part(text=self._text)])
                )
            ],
            usage_metadata=usage,
        )


def _client(models: FakeModels) -> GeminiModelClient:
    sdk_client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiModelClient(api_key="unused", client=sdk_client)


CONTENTS = [{"role": "user", "parts": [{"text": "hi"}]}]


class TestGeminiModelClient:
    """Tests for the SDK adapter."""

    def test_implements_protocol(self) -> None:
        assert isinstance(_client(FakeModels()), ModelClient)

    def test_count_tokens(self) -> None:
        models = FakeModels()
        assert asyncio.run(_client(models).count_tokens("gemini-2.0-flash", CONTENTS)) == 42
        assert models.requests[0]["model"] == "gemini-2.0-flash"

    def test_generate_content(self) -> None:
        models = FakeModels()
        result = asyncio.run(
            _client(models).generate_content(
                "gemini-2.0-flash", CONTENTS, {"temperature": 0.2, "top_p": 0.8}
            )
        )

        assert result.text == "Trends look good."
        assert result.prompt_token_count == 10
        assert result.total_token_count == 30
        assert result.raw["usage_metadata"]["total_token_count"] == 30

        config = models.requests[0]["config"]
        assert isinstance(config, types.GenerateContentConfig)
        assert config.temperature == 0.2
        assert config.top_p == 0.8

    def test_missing_usage_metadata(self) -> None:
        result = asyncio.run(
            _client(FakeModels(usage=False)).generate_content("m", CONTENTS, {"temperature": 0.2})
        )
        assert result.prompt_token_count is None
        assert result.total_token_count is None


class TestCaptureRawResponse:
    """Tests for raw response serialization."""

    def test_sdk_response(self) -> None:
        response = types.GenerateContentResponse(model_version="gemini-2.0-flash")
        assert capture_raw_response(response)["model_version"] == "gemini-2.0-flash"

    def test_plain_mapping(self) -> None:
        assert capture_raw_response({"model_version": "x"})["model_version"] == "x"

    def test_unserializable_gives_placeholder(self) -> None:
        captured = capture_raw_response(object())
        assert captured["error"] == SERIALIZE_ERROR
        assert captured["message"]
