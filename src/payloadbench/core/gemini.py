"""Gemini model client built on the google-genai SDK."""

from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types
from loguru import logger

from payloadbench.protocols import GenerationResult

SERIALIZE_ERROR = "Failed to serialize response"


def capture_raw_response(response: Any) -> Any:
    """Convert an SDK response into JSON-compatible data for audit files.

    Never raises: a response that cannot be serialized is replaced by an
    error placeholder object.
    """
    try:
        if hasattr(response, "model_dump"):
            return response.model_dump(mode="json", exclude_none=True)
        return types.GenerateContentResponse.model_validate(response).model_dump(
            mode="json", exclude_none=True
        )
    except Exception as e:
        logger.warning(f"Could not serialize raw response: {e}")
        return {"error": SERIALIZE_ERROR, "message": str(e)}


class GeminiModelClient:
    """ModelClient implementation for the Gemini API.

    Uses the async surface of ``genai.Client``; no rate limiting or retries
    happen here.
    """

    def __init__(self, api_key: str, client: genai.Client | None = None):
        self._client = client or genai.Client(api_key=api_key)

    async def count_tokens(self, model: str, contents: Any) -> int:
        response = await self._client.aio.models.count_tokens(model=model, contents=contents)
        return response.total_tokens or 0

    async def generate_content(self, model: str, contents: Any, config: Any) -> GenerationResult:
        if isinstance(config, dict):
            config = types.GenerateContentConfig(**config)
        response = await self._client.aio.models.generate_content(
            model=model, contents=contents, config=config
        )
        usage = response.usage_metadata
        return GenerationResult(
            text=response.text or "",
            prompt_token_count=usage.prompt_token_count if usage else None,
            total_token_count=usage.total_token_count if usage else None,
            raw=capture_raw_response(response),
        )


__all__ = ["SERIALIZE_ERROR", "GeminiModelClient", "capture_raw_response"]
