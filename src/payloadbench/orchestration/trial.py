"""Single benchmark trial: render every format, query the model, collect metrics."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from payloadbench.config import BenchSettings
from payloadbench.constants import EXCERPT_ELLIPSIS, INSTRUCTIONS
from payloadbench.core.dataset import load_dataset
from payloadbench.core.rate_limit import RateLimiter
from payloadbench.core.renderers import RenderedPayload, render_payloads
from payloadbench.domain import FormatMetrics, TrialSummary
from payloadbench.exceptions import ModelClientError
from payloadbench.protocols import DatasetLoader, GenerationResult, ModelClient, NotationEncoder
from payloadbench.results.deltas import compute_deltas


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision: ``2025-01-01T10:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_excerpt(text: str | None, max_length: int) -> str:
    """Truncate response text for the report, appending an ellipsis when cut."""
    if not text:
        return ""
    return text if len(text) <= max_length else f"{text[:max_length]}{EXCERPT_ELLIPSIS}"


def build_contents(label: str, payload: str) -> list[dict[str, Any]]:
    """One user turn: the fixed instructions, then the labelled payload."""
    return [
        {
            "role": "user",
            "parts": [
                {"text": INSTRUCTIONS},
                {"text": f"\nFormat: {label}\n---\n{payload}"},
            ],
        }
    ]


def display_path(path: Path) -> str:
    """Path relative to the working directory when it lies beneath it."""
    try:
        return str(path.resolve().relative_to(Path.cwd().resolve()))
    except ValueError:
        return str(path)


class TrialRunner:
    """Runs one trial across all format variants.

    The three per-format tasks run concurrently, but every outbound call
    passes through the shared ``RateLimiter`` so API traffic is serialized.
    """

    def __init__(
        self,
        client: ModelClient,
        settings: BenchSettings,
        limiter: RateLimiter | None = None,
        encoder: NotationEncoder | None = None,
        dataset_loader: DatasetLoader = load_dataset,
        now: Callable[[], str] = utc_timestamp,
    ):
        self._client = client
        self._settings = settings
        self._limiter = limiter or RateLimiter(settings.request_cooldown_ms)
        self._encoder = encoder
        self._load_dataset = dataset_loader
        self._now = now

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter

    async def _count_tokens(self, payload: RenderedPayload, contents: Any) -> int:
        model = self._settings.model
        try:
            return await self._limiter.run(lambda: self._client.count_tokens(model, contents))
        except Exception as e:
            raise ModelClientError(payload.format.value, "count_tokens", e) from e

    async def _generate(
        self, payload: RenderedPayload, contents: Any
    ) -> tuple[GenerationResult, float]:
        model = self._settings.model
        config = self._settings.generation.to_request_config()

        async def timed_call() -> tuple[GenerationResult, float]:
            # Timed inside the limiter so queueing is not counted as latency
            start = time.perf_counter()
            result = await self._client.generate_content(model, contents, config)
            return result, (time.perf_counter() - start) * 1000

        try:
            return await self._limiter.run(timed_call)
        except Exception as e:
            raise ModelClientError(payload.format.value, "generate_content", e) from e

    async def analyze_format(self, payload: RenderedPayload) -> FormatMetrics:
        """Count tokens for, then generate a response to, one payload.

        Raises:
            ModelClientError: If either API call fails.
        """
        contents = build_contents(payload.format.value, payload.text)
        preflight = await self._count_tokens(payload, contents)
        logger.debug(f"{payload.format.value}: {preflight} input tokens counted")

        result, latency_ms = await self._generate(payload, contents)
        logger.info(f"{payload.format.value}: response received in {latency_ms:.1f}ms")

        return FormatMetrics(
            format=payload.format,
            conversion_ms=payload.conversion_ms,
            preflight_token_count=preflight,
            response_prompt_token_count=result.prompt_token_count,
            response_total_token_count=result.total_token_count,
            api_latency_ms=latency_ms,
            response_text_excerpt=get_excerpt(result.text, self._settings.excerpt_max_length),
            raw_response=result.raw,
        )

    async def run_once(self) -> TrialSummary:
        """Run one full trial.

        Returns:
            TrialSummary with metrics for every format and all pair deltas.

        Raises:
            ConfigError: If the dataset cannot be loaded.
            ModelClientError: If any API call fails; the remaining format
                tasks are cancelled and no partial result is returned.
        """
        data = self._load_dataset(self._settings.dataset_path)
        payloads = render_payloads(data, self._encoder)

        tasks = [asyncio.create_task(self.analyze_format(p)) for p in payloads.values()]
        try:
            metrics = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return TrialSummary(
            model=self._settings.model,
            dataset_path=display_path(self._settings.dataset_path),
            timestamp=self._now(),
            formats=list(metrics),
            deltas=compute_deltas(metrics),
        )


__all__ = ["TrialRunner", "build_contents", "display_path", "get_excerpt", "utc_timestamp"]
