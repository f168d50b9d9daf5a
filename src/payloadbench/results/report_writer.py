"""Markdown rendering of trial and aggregate reports.

The metrics table is read back by ``report_reader``: its column order, the
``N.Nms`` duration format and the thousands separators must stay in sync with
the parser.
"""

from __future__ import annotations

import math

from payloadbench.constants import METRICS_TABLE_COLUMNS, NOT_AVAILABLE
from payloadbench.domain import (
    COMPARISON_PAIRS,
    FORMAT_ORDER,
    AggregatedSummary,
    ComparisonPair,
    FormatMetrics,
    FormatVariant,
    PairDelta,
    TrialSummary,
)

TRIAL_REPORT_TITLE = "# Gemini Benchmark Report"
SUMMARY_REPORT_TITLE = "# Overall Comparison Summary"
NO_EXCERPT = "_No response text captured._"

# Latency differences below this are reported as a tie
LATENCY_TIE_MS = 1.0

# Formats whose conversion overhead is reported against JSON
OVERHEAD_FORMATS = (FormatVariant.TOON, FormatVariant.MARKDOWN)

_METRIC_DEFINITIONS = (
    "- **Input tokens sent**: Tokens counted before calling Gemini (via the Count Tokens API).",
    "- **Prompt tokens in response**: Tokens Gemini reports as used from the request after processing.",
    "- **Total tokens in response**: Combined prompt and output token count reported by Gemini.",
    "- **Data prep time**: Time spent preparing the payload "
    "(JSON formatting, TOON encoding, or Markdown conversion).",
    "- **Gemini response time**: End-to-end latency for `models.generateContent`.",
)


def format_ms(ms: float) -> str:
    """Render a duration with exactly one decimal digit: ``7533.0ms``."""
    return f"{ms:.1f}ms"


def format_count(value: int | None) -> str:
    """Render a token count with thousands separators, ``n/a`` when absent."""
    return NOT_AVAILABLE if value is None else f"{value:,}"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_excerpt(excerpt: str) -> str:
    """Block-quote an excerpt unless it already opens a code fence."""
    if not excerpt:
        return NO_EXCERPT
    return excerpt if excerpt.startswith("```") else f"> {excerpt}"


def _other(pair: ComparisonPair, variant: FormatVariant) -> FormatVariant:
    return pair.baseline if variant is pair.comparison else pair.comparison


def token_sentence(pair: ComparisonPair, delta: PairDelta) -> str:
    winner = delta.token_winner
    if winner is None:
        return f"{pair.label}: both formats used the same number of input tokens."
    return (
        f"{pair.label}: {winner.value} reduced input tokens by "
        f"{abs(round_half_up(delta.token_savings)):,} "
        f"({abs(delta.token_savings_percent):.1f}%) compared with {_other(pair, winner).value}."
    )


def latency_sentence(pair: ComparisonPair, delta: PairDelta) -> str:
    if abs(delta.api_latency_delta_ms) < LATENCY_TIE_MS or delta.latency_winner is None:
        return f"{pair.label}: both formats returned responses in roughly the same time."
    faster = delta.latency_winner
    return (
        f"{pair.label}: {faster.value} responses arrived approximately "
        f"{format_ms(abs(delta.api_latency_delta_ms))} faster than {_other(pair, faster).value}."
    )


def overhead_line(variant: FormatVariant, overhead_ms: float) -> str:
    """Signed conversion overhead of a format relative to JSON.

    Parsed back by the report reader, sign included.
    """
    return f"- {variant.value} conversion overhead: {format_ms(overhead_ms)}"


def _table(rows: list[list[str]]) -> list[str]:
    lines = [
        " | ".join(METRICS_TABLE_COLUMNS),
        " | ".join("---" for _ in METRICS_TABLE_COLUMNS),
    ]
    lines.extend(" | ".join(row) for row in rows)
    return lines


def metrics_row(metrics: FormatMetrics) -> list[str]:
    return [
        metrics.format.value,
        format_count(metrics.preflight_token_count),
        format_count(metrics.response_prompt_token_count),
        format_count(metrics.response_total_token_count),
        format_ms(metrics.conversion_ms),
        format_ms(metrics.api_latency_ms),
    ]


def _delta_block(pair: ComparisonPair, delta: PairDelta) -> list[str]:
    baseline, comparison = pair.baseline.value, pair.comparison.value
    return [
        f"### {pair.label}",
        f"- **Token savings:** {round_half_up(delta.token_savings):,} tokens "
        f"({delta.token_savings_percent:.2f}%)",
        f"- **API latency delta ({baseline} - {comparison}):** "
        f"{format_ms(delta.api_latency_delta_ms)}",
        f"- **Conversion overhead ({comparison} - {baseline}):** "
        f"{format_ms(delta.conversion_overhead_ms)}",
        "",
    ]


def _overhead_vs_json(deltas: dict[str, PairDelta], variant: FormatVariant) -> float | None:
    delta = deltas.get(ComparisonPair(variant, FormatVariant.JSON).key)
    return None if delta is None else delta.conversion_overhead_ms


def render_trial_report(summary: TrialSummary) -> str:
    """Render one trial as the canonical Markdown report."""
    lines = [
        TRIAL_REPORT_TITLE,
        "",
        f"- **Model used:** {summary.model}",
        f"- **Dataset:** {summary.dataset_path}",
        f"- **Run timestamp:** {summary.timestamp}",
        "",
        "## Executive Summary",
        "",
    ]
    for pair in COMPARISON_PAIRS:
        delta = summary.deltas.get(pair.key)
        if delta is not None:
            lines.append(f"- {token_sentence(pair, delta)}")
            lines.append(f"- {latency_sentence(pair, delta)}")
    for variant in OVERHEAD_FORMATS:
        overhead = _overhead_vs_json(summary.deltas, variant)
        if overhead is not None:
            lines.append(overhead_line(variant, overhead))

    lines += ["", "## Detailed Metrics", ""]
    lines += _table([metrics_row(m) for m in summary.formats])

    lines += ["", "## Comparison Deltas", ""]
    for pair in COMPARISON_PAIRS:
        delta = summary.deltas.get(pair.key)
        if delta is not None:
            lines += _delta_block(pair, delta)

    lines += ["## Response Highlights", ""]
    for metrics in summary.formats:
        excerpt = format_excerpt(metrics.response_text_excerpt)
        lines += [f"### {metrics.format.value} input", excerpt, ""]

    lines += ["## Metric Definitions", "", *_METRIC_DEFINITIONS]
    lines.append(
        "- **Response highlights**: A short excerpt of Gemini's answer to compare tone and content."
    )
    return "\n".join(lines) + "\n"


def _saved_line(pair: ComparisonPair, delta: PairDelta) -> str:
    winner = delta.token_winner
    if winner is None:
        return f"- **{pair.label}:** no difference in input tokens"
    return (
        f"- **{pair.label}:** {winner.value} saved "
        f"{abs(round_half_up(delta.token_savings)):,} tokens "
        f"({abs(delta.token_savings_percent):.2f}%)"
    )


def _key_insights(summary: AggregatedSummary) -> list[str]:
    deltas = summary.average_deltas
    toon_vs_json = deltas[ComparisonPair(FormatVariant.TOON, FormatVariant.JSON).key]
    markdown_vs_json = deltas[ComparisonPair(FormatVariant.MARKDOWN, FormatVariant.JSON).key]

    if toon_vs_json.token_savings_percent > markdown_vs_json.token_savings_percent:
        best_tokens = toon_vs_json
    else:
        best_tokens = markdown_vs_json
    if toon_vs_json.conversion_overhead_ms < markdown_vs_json.conversion_overhead_ms:
        cheapest = toon_vs_json
    else:
        cheapest = markdown_vs_json
    fastest = summary.average_metrics[summary.fastest_format]

    return [
        f"1. **Token Efficiency:** {best_tokens.comparison.value} provides the best token savings "
        f"compared to JSON ({best_tokens.token_savings_percent:.2f}% reduction).",
        "",
        f"2. **API Latency:** {summary.fastest_format.value} has the fastest average API response "
        f"time at {format_ms(fastest.api_latency_ms)}.",
        "",
        f"3. **Conversion Overhead:** {cheapest.comparison.value} has lower conversion overhead "
        f"({format_ms(cheapest.conversion_overhead_ms)}).",
    ]


def render_summary_report(summary: AggregatedSummary) -> str:
    """Render averages across N trials.

    Contains no generation timestamp, so the same input always renders to the
    same bytes.
    """
    lines = [
        SUMMARY_REPORT_TITLE,
        "",
        f"- **Total Benchmark Runs:** {summary.total_runs}",
        f"- **Model Used:** {summary.model}",
        f"- **Date Range:** {summary.date_range.earliest} to {summary.date_range.latest}",
        f"- **Fastest Format (avg API latency):** {summary.fastest_format.value}",
        "",
        "## Executive Summary",
        "",
        "### Token Efficiency (Average)",
        "",
    ]
    for pair in COMPARISON_PAIRS:
        lines.append(_saved_line(pair, summary.average_deltas[pair.key]))

    lines += ["", "### Latency (Average)", ""]
    lines.append(f"- **Fastest format:** {summary.fastest_format.value}")
    for variant in OVERHEAD_FORMATS:
        overhead = _overhead_vs_json(summary.average_deltas, variant)
        if overhead is not None:
            lines.append(f"- **{variant.value} conversion overhead:** {format_ms(overhead)}")

    lines += ["", "## Detailed Average Metrics", ""]
    rows = []
    for variant in FORMAT_ORDER:
        avg = summary.average_metrics[variant]
        rows.append(
            [
                variant.value,
                f"{round_half_up(avg.preflight_token_count):,}",
                f"{round_half_up(avg.response_prompt_token_count):,}",
                f"{round_half_up(avg.response_total_token_count):,}",
                format_ms(avg.conversion_ms),
                format_ms(avg.api_latency_ms),
            ]
        )
    lines += _table(rows)

    lines += ["", "## Comparison Deltas (Average)", ""]
    for pair in COMPARISON_PAIRS:
        lines += _delta_block(pair, summary.average_deltas[pair.key])

    lines += ["## Key Insights", "", *_key_insights(summary), ""]
    lines += ["## Metric Definitions", "", *_METRIC_DEFINITIONS]
    return "\n".join(lines) + "\n"


__all__ = [
    "format_count",
    "format_excerpt",
    "format_ms",
    "latency_sentence",
    "overhead_line",
    "render_summary_report",
    "render_trial_report",
    "token_sentence",
]
