"""Payload rendering for every format variant.

Each variant is rendered from the same dataset; the wall-clock time spent
producing each payload is recorded as the conversion duration.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any

import toon

from payloadbench.core.markdown import render_markdown
from payloadbench.domain import FORMAT_ORDER, FormatVariant
from payloadbench.protocols import NotationEncoder


@dataclass(frozen=True)
class RenderedPayload:
    """A serialized payload and how long it took to produce."""

    format: FormatVariant
    text: str
    conversion_ms: float


def render_json(data: Any) -> str:
    """Pretty-print with the key order of the input structure."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_payload(
    variant: FormatVariant,
    data: Any,
    encoder: NotationEncoder | None = None,
) -> RenderedPayload:
    """Render one format variant and time it.

    Args:
        variant: Format to produce.
        data: JSON-compatible dataset.
        encoder: Compact-notation encoder (defaults to ``toon.encode``).

    Returns:
        RenderedPayload with the text and conversion duration in milliseconds.
    """
    start = time.perf_counter()
    if variant is FormatVariant.JSON:
        text = render_json(data)
    elif variant is FormatVariant.TOON:
        text = (encoder or toon.encode)(data)
    else:
        text = render_markdown(data)
    elapsed_ms = (time.perf_counter() - start) * 1000
    return RenderedPayload(format=variant, text=text, conversion_ms=elapsed_ms)


def render_payloads(
    data: Any,
    encoder: NotationEncoder | None = None,
) -> dict[FormatVariant, RenderedPayload]:
    """Render every format variant, in enumeration order."""
    return {variant: render_payload(variant, data, encoder) for variant in FORMAT_ORDER}


__all__ = ["RenderedPayload", "render_json", "render_payload", "render_payloads"]
