"""Pairwise comparison deltas between format metrics.

Pure functions, no I/O. Sign conventions are documented on ``PairDelta``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from payloadbench.domain import (
    COMPARISON_PAIRS,
    ComparisonPair,
    FormatMetrics,
    FormatVariant,
    PairDelta,
)


def compute_pair_delta(
    baseline: FormatMetrics,
    comparison: FormatMetrics,
    conversion_overhead_ms: float | None = None,
) -> PairDelta:
    """Compare one format's metrics against a baseline format's.

    Args:
        baseline: Metrics of the reference format.
        comparison: Metrics of the format being compared.
        conversion_overhead_ms: Externally supplied overhead figure; computed
            from the conversion times when omitted.

    Returns:
        PairDelta with baseline and comparison named explicitly.
    """
    savings = baseline.preflight_token_count - comparison.preflight_token_count
    percent = (
        savings / baseline.preflight_token_count * 100 if baseline.preflight_token_count else 0.0
    )
    if conversion_overhead_ms is None:
        conversion_overhead_ms = comparison.conversion_ms - baseline.conversion_ms
    return PairDelta(
        baseline=baseline.format,
        comparison=comparison.format,
        token_savings=savings,
        token_savings_percent=percent,
        api_latency_delta_ms=baseline.api_latency_ms - comparison.api_latency_ms,
        conversion_overhead_ms=conversion_overhead_ms,
    )


def compute_deltas(
    metrics: Iterable[FormatMetrics],
    overhead_overrides: Mapping[str, float] | None = None,
    pairs: Iterable[ComparisonPair] = COMPARISON_PAIRS,
) -> dict[str, PairDelta]:
    """Compute a delta for every comparison pair.

    Args:
        metrics: One FormatMetrics per format variant.
        overhead_overrides: Conversion overhead per pair key that should be
            taken as given instead of recomputed.
        pairs: Pairs to compute; defaults to the fixed comparison pairs.

    Returns:
        Mapping of pair key (e.g. ``toon_vs_json``) to PairDelta.

    Raises:
        KeyError: If a pair references a format missing from ``metrics``.
    """
    by_format: dict[FormatVariant, FormatMetrics] = {m.format: m for m in metrics}
    overrides = overhead_overrides or {}
    return {
        pair.key: compute_pair_delta(
            by_format[pair.baseline],
            by_format[pair.comparison],
            overrides.get(pair.key),
        )
        for pair in pairs
    }


__all__ = ["compute_deltas", "compute_pair_delta"]
