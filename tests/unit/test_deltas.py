"""Tests for pairwise delta computation."""

from __future__ import annotations

import pytest

from payloadbench.domain import FormatVariant
from payloadbench.results.deltas import compute_deltas, compute_pair_delta
from tests.fakes import make_metrics

JSON, TOON, MARKDOWN = FormatVariant.JSON, FormatVariant.TOON, FormatVariant.MARKDOWN


class TestComputePairDelta:
    """Tests for a single baseline/comparison delta."""

    def test_reference_scenario(self) -> None:
        baseline = make_metrics(JSON, preflight=1404, latency_ms=7533.0, conversion_ms=0.5)
        comparison = make_metrics(TOON, preflight=1004, latency_ms=6712.0, conversion_ms=1.8)

        delta = compute_pair_delta(baseline, comparison)

        assert delta.baseline is JSON
        assert delta.comparison is TOON
        assert delta.token_savings == 400
        assert delta.token_savings_percent == pytest.approx(28.49, abs=0.01)
        assert delta.api_latency_delta_ms == 821.0
        assert delta.conversion_overhead_ms == pytest.approx(1.3)
        assert delta.token_winner is TOON
        assert delta.latency_winner is TOON

    def test_zero_baseline_tokens_gives_zero_percent(self) -> None:
        delta = compute_pair_delta(make_metrics(JSON, preflight=0), make_metrics(TOON, preflight=5))
        assert delta.token_savings == -5
        assert delta.token_savings_percent == 0.0

    def test_comparison_using_more_tokens_is_negative(self) -> None:
        delta = compute_pair_delta(
            make_metrics(JSON, preflight=1000, latency_ms=900.0),
            make_metrics(MARKDOWN, preflight=1100, latency_ms=1000.0),
        )
        assert delta.token_savings == -100
        assert delta.token_savings_percent == pytest.approx(-10.0)
        assert delta.api_latency_delta_ms == -100.0
        assert delta.token_winner is JSON
        assert delta.latency_winner is JSON

    def test_ties_have_no_winner(self) -> None:
        delta = compute_pair_delta(make_metrics(JSON), make_metrics(TOON))
        assert delta.token_winner is None
        assert delta.latency_winner is None

    def test_overhead_override(self) -> None:
        delta = compute_pair_delta(
            make_metrics(JSON, conversion_ms=1.0),
            make_metrics(TOON, conversion_ms=5.0),
            conversion_overhead_ms=-2.5,
        )
        assert delta.conversion_overhead_ms == -2.5

    def test_deterministic(self) -> None:
        a = make_metrics(JSON, preflight=1404)
        b = make_metrics(TOON, preflight=1004)
        assert compute_pair_delta(a, b) == compute_pair_delta(a, b)


class TestComputeDeltas:
    """Tests for deltas over the fixed comparison pairs."""

    def test_all_pairs_with_named_operands(self) -> None:
        metrics = [
            make_metrics(JSON, preflight=1404),
            make_metrics(TOON, preflight=1004),
            make_metrics(MARKDOWN, preflight=1200),
        ]
        deltas = compute_deltas(metrics)

        assert list(deltas) == ["toon_vs_json", "markdown_vs_json", "markdown_vs_toon"]
        assert (deltas["toon_vs_json"].baseline, deltas["toon_vs_json"].comparison) == (JSON, TOON)
        assert deltas["markdown_vs_json"].token_savings == 204
        assert deltas["markdown_vs_toon"].baseline is TOON
        assert deltas["markdown_vs_toon"].token_savings == -196

    def test_overrides_apply_per_pair(self) -> None:
        metrics = [make_metrics(v, conversion_ms=1.0) for v in FormatVariant]
        deltas = compute_deltas(metrics, {"markdown_vs_toon": 0.7})
        assert deltas["markdown_vs_toon"].conversion_overhead_ms == 0.7
        assert deltas["toon_vs_json"].conversion_overhead_ms == 0.0

    def test_missing_format_raises(self) -> None:
        with pytest.raises(KeyError):
            compute_deltas([make_metrics(JSON), make_metrics(TOON)])
