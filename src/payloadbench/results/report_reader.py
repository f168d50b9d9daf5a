"""Parse stored Markdown trial reports back into TrialSummary records.

Only the metrics table and the header metadata are trusted. Deltas are always
recomputed from the parsed metrics, except for conversion overhead, which is
taken from the signed ``- <FORMAT> conversion overhead: N.Nms`` lines when a
report carries them.
"""

from __future__ import annotations

import math
import re
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from payloadbench.constants import METRICS_TABLE_COLUMNS, NOT_AVAILABLE
from payloadbench.domain import (
    FORMAT_ORDER,
    ComparisonPair,
    FormatMetrics,
    FormatVariant,
    TrialSummary,
)
from payloadbench.exceptions import ReportParseError
from payloadbench.results.deltas import compute_deltas

_MODEL_RE = re.compile(r"\*\*Model used:\*\* (.+)")
_TIMESTAMP_RE = re.compile(r"\*\*Run timestamp:\*\* (.+)")
_DATASET_RE = re.compile(r"\*\*Dataset:\*\* (.+)")
_MS_RE = re.compile(r"(-?[\d,]*\.?\d+)\s*ms\s*$")
_OVERHEAD_RE = re.compile(
    r"^- (?P<format>[A-Z]+) conversion overhead: (?P<value>-?[\d,]*\.?\d+)ms\s*$",
    re.MULTILINE,
)

_TABLE_MARKER = f"{METRICS_TABLE_COLUMNS[0]} | {METRICS_TABLE_COLUMNS[1]}"
_ROW_FIELDS = len(METRICS_TABLE_COLUMNS)

UNKNOWN_MODEL = "unknown"


def parse_count(text: str) -> int:
    """Parse a token count cell: ``1,404`` → 1404, ``n/a`` → 0."""
    text = text.strip()
    if text == NOT_AVAILABLE:
        return 0
    try:
        return int(float(text.replace(",", "")))
    except (ValueError, OverflowError) as e:
        raise ReportParseError(f"Invalid token count: {text!r}") from e


def parse_ms(text: str) -> float:
    """Parse a duration cell: ``7,533.0ms`` → 7533.0, ``n/a`` → 0."""
    text = text.strip()
    if text == NOT_AVAILABLE:
        return 0.0
    match = _MS_RE.search(text)
    if match is None:
        raise ReportParseError(f"Invalid duration: {text!r}")
    value = float(match.group(1).replace(",", ""))
    if not math.isfinite(value):
        raise ReportParseError(f"Duration out of range: {text!r}")
    return value


def _table_rows(content: str) -> list[list[str]]:
    rows: list[list[str]] = []
    in_table = False
    for line in content.splitlines():
        if not in_table:
            in_table = _TABLE_MARKER in line
            continue
        if line.startswith("##"):
            break
        parts = [part.strip() for part in line.split("|") if part.strip()]
        if len(parts) < _ROW_FIELDS or parts[0] == METRICS_TABLE_COLUMNS[0]:
            continue
        if parts[0].startswith("---"):
            continue
        rows.append(parts)
    return rows


def _parse_row(parts: list[str]) -> FormatMetrics:
    try:
        variant = FormatVariant(parts[0])
    except ValueError as e:
        raise ReportParseError(f"Unknown format in metrics table: {parts[0]!r}") from e
    try:
        return FormatMetrics(
            format=variant,
            preflight_token_count=parse_count(parts[1]),
            response_prompt_token_count=parse_count(parts[2]),
            response_total_token_count=parse_count(parts[3]),
            conversion_ms=parse_ms(parts[4]),
            api_latency_ms=parse_ms(parts[5]),
        )
    except ValidationError as e:
        raise ReportParseError(f"Invalid {variant.value} metrics row: {e}") from e


def _overhead_overrides(content: str) -> dict[str, float]:
    """Map pair key → conversion overhead from the signed overhead lines."""
    versus_json: dict[FormatVariant, float] = {}
    for match in _OVERHEAD_RE.finditer(content):
        try:
            variant = FormatVariant(match.group("format"))
        except ValueError:
            continue
        versus_json.setdefault(variant, float(match.group("value").replace(",", "")))

    overrides = {
        ComparisonPair(variant, FormatVariant.JSON).key: value
        for variant, value in versus_json.items()
        if variant is not FormatVariant.JSON
    }
    if FormatVariant.TOON in versus_json and FormatVariant.MARKDOWN in versus_json:
        overrides[ComparisonPair(FormatVariant.MARKDOWN, FormatVariant.TOON).key] = (
            versus_json[FormatVariant.MARKDOWN] - versus_json[FormatVariant.TOON]
        )
    return overrides


def parse_markdown_report(content: str) -> TrialSummary:
    """Recover a TrialSummary from a trial report's Markdown.

    Args:
        content: Full Markdown text of a trial report.

    Returns:
        TrialSummary with formats from the metrics table and recomputed deltas.
        Response excerpts and raw responses are not recovered.

    Raises:
        ReportParseError: If the timestamp is missing, the table does not hold
            exactly one valid row per format, or a cell cannot be parsed.
    """
    timestamp_match = _TIMESTAMP_RE.search(content)
    if timestamp_match is None:
        raise ReportParseError("Missing run timestamp")
    model_match = _MODEL_RE.search(content)
    dataset_match = _DATASET_RE.search(content)

    rows = _table_rows(content)
    if len(rows) != len(FORMAT_ORDER):
        raise ReportParseError(
            f"Expected {len(FORMAT_ORDER)} metrics rows, found {len(rows)}"
        )
    formats = [_parse_row(parts) for parts in rows]
    if {m.format for m in formats} != set(FORMAT_ORDER):
        raise ReportParseError(
            f"Metrics table must hold one row per format, got {[m.format.value for m in formats]}"
        )

    try:
        return TrialSummary(
            model=model_match.group(1).strip() if model_match else UNKNOWN_MODEL,
            dataset_path=dataset_match.group(1).strip() if dataset_match else "",
            timestamp=timestamp_match.group(1).strip(),
            formats=formats,
            deltas=compute_deltas(formats, _overhead_overrides(content)),
        )
    except ValidationError as e:
        raise ReportParseError(f"Inconsistent metrics table: {e}") from e


def read_markdown_report(path: Path) -> TrialSummary | None:
    """Parse a report file, logging and returning None when it is unusable."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping {path.name}: could not read report ({e})")
        return None
    try:
        return parse_markdown_report(content)
    except ReportParseError as e:
        logger.warning(f"Skipping {path.name}: {e}")
        return None


__all__ = ["parse_count", "parse_markdown_report", "parse_ms", "read_markdown_report"]
