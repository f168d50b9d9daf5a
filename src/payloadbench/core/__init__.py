"""Core benchmark functionality: payload rendering, rate limiting, model client."""

from payloadbench.core.dataset import load_dataset
from payloadbench.core.gemini import GeminiModelClient, capture_raw_response
from payloadbench.core.markdown import render_markdown
from payloadbench.core.rate_limit import RateLimiter
from payloadbench.core.renderers import (
    RenderedPayload,
    render_json,
    render_payload,
    render_payloads,
)

__all__ = [
    "GeminiModelClient",
    "RateLimiter",
    "RenderedPayload",
    "capture_raw_response",
    "load_dataset",
    "render_json",
    "render_markdown",
    "render_payload",
    "render_payloads",
]
